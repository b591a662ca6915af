import copy
import threading

import pytest

from exam_vocabulary.config import PipelineConfig


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data) if data is not None else None

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, db, collection_name, doc_id):
        self.db = db
        self.collection_name = collection_name
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self, self.db.collections.get(self.collection_name, {}).get(self.id))

    def set(self, data, merge=False):
        store = self.db.collections.setdefault(self.collection_name, {})
        if merge and self.id in store:
            store[self.id].update(copy.deepcopy(data))
        else:
            store[self.id] = copy.deepcopy(data)

    def delete(self):
        self.db.collections.get(self.collection_name, {}).pop(self.id, None)


class FakeQuery:
    """Positional ``where`` only, like the simple doubles ``apply_where`` falls back for."""

    def __init__(self, db, collection_name, filters=(), limit_count=None):
        self.db = db
        self.collection_name = collection_name
        self.filters = tuple(filters)
        self.limit_count = limit_count

    def document(self, doc_id):
        return FakeDocRef(self.db, self.collection_name, doc_id)

    def where(self, field_path, op_string, value):
        return FakeQuery(self.db, self.collection_name, self.filters + ((field_path, op_string, value),), self.limit_count)

    def limit(self, count):
        return FakeQuery(self.db, self.collection_name, self.filters, count)

    def _matches(self, data):
        for field_path, op_string, value in self.filters:
            current = data.get(field_path)
            if op_string == '==' and current != value:
                return False
            if op_string == '>=' and not (isinstance(current, (int, float)) and current >= value):
                return False
            if op_string == 'array_contains' and value not in (current or []):
                return False
        return True

    def stream(self):
        store = self.db.collections.get(self.collection_name, {})
        results = []
        for doc_id in sorted(store):
            if not self._matches(store[doc_id]):
                continue
            results.append(FakeSnapshot(self.document(doc_id), store[doc_id]))
            if self.limit_count is not None and len(results) >= self.limit_count:
                break
        return iter(results)


class FakeBatch:
    def __init__(self, db):
        self.db = db
        self.operations = []

    def set(self, ref, data, merge=False):
        self.operations.append(('set', ref, copy.deepcopy(data), merge))

    def delete(self, ref):
        self.operations.append(('delete', ref, None, False))

    def commit(self):
        self.db.commit_attempts += 1
        if self.db.fail_commits > 0:
            self.db.fail_commits -= 1
            raise RuntimeError('simulated commit failure')
        if self.db.fail_after_commits is not None and self.db.commits >= self.db.fail_after_commits:
            raise RuntimeError('simulated outage')
        for op, ref, data, merge in self.operations:
            if op == 'set':
                ref.set(data, merge=merge)
            else:
                ref.delete()
        self.db.commits += 1
        self.db.committed_sizes.append(len(self.operations))


class FakeTransaction(FakeBatch):
    """Writes queue like a batch and apply when the transactional wrapper commits."""


def fake_transactional(func):
    """Stands in for ``firestore.transactional``: reads and writes run under one db-wide lock."""

    def _run(transaction, *args, **kwargs):
        with transaction.db.transaction_lock:
            transaction.operations = []
            result = func(transaction, *args, **kwargs)
            transaction.commit()
            return result

    return _run


class FakeFirestoreModule:
    transactional = staticmethod(fake_transactional)


class FakeFirestore:
    def __init__(self):
        self.collections = {}
        self.commits = 0
        self.commit_attempts = 0
        self.committed_sizes = []
        self.fail_commits = 0
        self.fail_after_commits = None
        self.transaction_lock = threading.RLock()

    def collection(self, name):
        return FakeQuery(self, name)

    def batch(self):
        return FakeBatch(self)

    def transaction(self):
        return FakeTransaction(self)

    def get_all(self, refs, transaction=None):
        for ref in refs:
            yield ref.get()

    def seed(self, collection_name, doc_id, data):
        self.collections.setdefault(collection_name, {})[doc_id] = copy.deepcopy(data)

    def docs(self, collection_name):
        return self.collections.get(collection_name, {})


class FakeResponse:
    def __init__(self, status_code=200, payload=None, raise_on_json=False):
        self.status_code = status_code
        self._payload = payload
        self._raise_on_json = raise_on_json

    def json(self):
        if self._raise_on_json:
            raise ValueError('not json')
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            import requests

            raise requests.HTTPError(f"{self.status_code} error")


def dictionary_payload(word, definition=None, synonyms=('notion',), part_of_speech='noun'):
    return [{
        'word': word,
        'phonetic': f'/{word}/',
        'meanings': [{
            'partOfSpeech': part_of_speech,
            'definitions': [{'definition': definition or f'A formal dictionary definition of the word {word}.'}],
            'synonyms': list(synonyms),
        }],
    }]


class FakeDictionarySession:
    """Answers like the Free Dictionary API: known words get a definition, others 404."""

    def __init__(self, known=None, missing=(), errors=()):
        self.known = dict(known or {})
        self.missing = set(missing)
        self.errors = set(errors)
        self.requested = []

    def get(self, url, timeout=None):
        word = url.rsplit('/', 1)[-1]
        self.requested.append(word)
        if word in self.errors:
            import requests

            raise requests.ConnectionError('dictionary unreachable')
        if word in self.missing:
            return FakeResponse(404, {'title': 'No Definitions Found'})
        if word in self.known:
            return FakeResponse(200, self.known[word])
        return FakeResponse(200, dictionary_payload(word))


@pytest.fixture()
def fake_db():
    return FakeFirestore()


@pytest.fixture()
def pipeline_config():
    return PipelineConfig(enrich_batch_delay_seconds=0.0, retry_backoff_seconds=0.0)


@pytest.fixture()
def dictionary_session():
    return FakeDictionarySession()


@pytest.fixture()
def firestore_module():
    return FakeFirestoreModule
