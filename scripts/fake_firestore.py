"""In-memory stand-in for the small Firestore surface the services use.

Supports collection/document refs, `==` and `in` filters, `order_by`,
`limit`, `stream` and buffered transactions. Only for tests.
"""
import copy
import uuid

from google.api_core.exceptions import AlreadyExists


class FakeSnapshot:
    def __init__(self, ref, data):
        self.reference = ref
        self.id = ref.id
        self._data = copy.deepcopy(data)

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocRef:
    def __init__(self, db, collection, doc_id):
        self._db = db
        self.collection_name = collection
        self.id = doc_id

    @property
    def _docs(self):
        return self._db.data.setdefault(self.collection_name, {})

    def get(self, transaction=None):
        return FakeSnapshot(self, self._docs.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._docs:
            self._docs[self.id].update(copy.deepcopy(data))
        else:
            self._docs[self.id] = copy.deepcopy(data)

    def create(self, data):
        if self.id in self._docs:
            raise AlreadyExists(f"Document already exists: {self.collection_name}/{self.id}")
        self._docs[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self._docs:
            raise KeyError(f"No document to update: {self.collection_name}/{self.id}")
        self._docs[self.id].update(copy.deepcopy(data))

    def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, db, collection, filters=(), order=None, max_items=None):
        self._db = db
        self._collection = collection
        self._filters = list(filters)
        self._order = order
        self._limit = max_items

    def _copy(self, **kw):
        args = dict(filters=self._filters, order=self._order, max_items=self._limit)
        args.update(kw)
        return FakeQuery(self._db, self._collection, **args)

    def where(self, field, op, value):
        if op not in ("==", "in"):
            raise NotImplementedError(op)
        return self._copy(filters=self._filters + [(field, op, value)])

    def order_by(self, field, direction="ASCENDING"):
        return self._copy(order=(field, direction))

    def limit(self, n):
        return self._copy(max_items=n)

    def _matches(self, data):
        for field, op, value in self._filters:
            if op == "==" and data.get(field) != value:
                return False
            if op == "in" and data.get(field) not in value:
                return False
        return True

    def stream(self, transaction=None):
        docs = self._db.data.get(self._collection, {})
        items = [(doc_id, d) for doc_id, d in docs.items() if self._matches(d)]
        if self._order:
            field, direction = self._order
            items.sort(key=lambda kv: kv[1].get(field), reverse=direction == "DESCENDING")
        if self._limit is not None:
            items = items[: self._limit]
        for doc_id, _ in items:
            ref = FakeDocRef(self._db, self._collection, doc_id)
            yield ref.get()

    def get(self):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        super().__init__(db, name)
        self.name = name

    def document(self, doc_id=None):
        return FakeDocRef(self._db, self.name, doc_id or uuid.uuid4().hex)

    def add(self, data):
        ref = self.document()
        ref.set(data)
        return None, ref


class FakeTransaction:
    """Buffers writes and applies them on commit, like a real transaction."""

    def __init__(self):
        self.writes = []

    def set(self, ref, data, merge=False):
        self.writes.append(("set", ref, data, merge))

    def update(self, ref, data):
        self.writes.append(("update", ref, data, None))

    def commit(self):
        for op, ref, data, merge in self.writes:
            if op == "set":
                ref.set(data, merge=merge)
            else:
                ref.update(data)


class FakeFirestore:
    def __init__(self, data=None):
        self.data = copy.deepcopy(data) if data else {}
        self.transactions = []

    def collection(self, name):
        return FakeCollection(self, name)

    def transaction(self):
        tx = FakeTransaction()
        self.transactions.append(tx)
        return tx


def run_in_fake_transaction(db, fn, *args, **kwargs):
    """Drop-in for app.core.firebase.run_in_transaction."""
    tx = db.transaction()
    result = fn(tx, *args, **kwargs)
    tx.commit()
    return result
