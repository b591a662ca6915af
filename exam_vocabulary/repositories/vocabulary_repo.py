"""Firestore accessors for the vocabulary collection."""

from .query_utils import apply_limit, apply_where


def doc_ref(db, collection_name, word):
    return db.collection(collection_name).document(word)


def get_docs(db, collection_name, words, transaction=None):
    """Fetch snapshots for ``words`` in one round trip, keyed by document id."""
    refs = [doc_ref(db, collection_name, word) for word in words]
    if not refs:
        return {}
    return {snapshot.id: snapshot for snapshot in db.get_all(refs, transaction=transaction)}


def list_doc_refs(db, collection_name, limit):
    return [doc.reference for doc in apply_limit(db.collection(collection_name), limit).stream()]


def query_entries(db, collection_name, *, subject_area=None, min_frequency=None, limit=None):
    """Stream vocabulary snapshots matching the filters.

    A subject filter matches the ``subjectAreas`` array and also the scalar
    ``subjectArea`` older documents carry; the two result sets merge by word.
    """
    query = db.collection(collection_name)
    if isinstance(min_frequency, int) and min_frequency > 1:
        query = apply_where(query, 'frequency', '>=', min_frequency)
    if not subject_area:
        return list(apply_limit(query, limit).stream())

    snapshots = {}
    for field_path, op_string in (('subjectAreas', 'array_contains'), ('subjectArea', '==')):
        subject_query = apply_where(query, field_path, op_string, subject_area)
        for snapshot in apply_limit(subject_query, limit).stream():
            snapshots.setdefault(snapshot.id, snapshot)
    results = list(snapshots.values())
    return results[:limit] if limit else results
