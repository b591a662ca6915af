"""Firestore accessors for extraction run audit records."""


def doc_ref(db, collection_name, run_id):
    return db.collection(collection_name).document(run_id)


def set_doc(db, collection_name, run_id, payload, merge=False):
    return doc_ref(db, collection_name, run_id).set(payload, merge=merge)


def get_doc(db, collection_name, run_id):
    return doc_ref(db, collection_name, run_id).get()
