"""
Shared fixtures: an in-memory Firestore double and authenticated callers.
"""
import copy
import uuid
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from flask_jwt_extended import create_access_token
from google.api_core.exceptions import AlreadyExists, NotFound
from google.cloud import firestore

from dogmatch import create_app

TEST_CONFIG = {
    "TESTING": True,
    "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
    "APP_ENV": "test",
}


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None

    def get(self, field):
        return self._data.get(field)


class FakeDocumentRef:
    def __init__(self, db, collection, doc_id):
        self._db = db
        self._collection = collection
        self.id = doc_id

    @property
    def _docs(self):
        return self._db.store.setdefault(self._collection, {})

    def get(self):
        return FakeSnapshot(self.id, self._docs.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._docs:
            self._docs[self.id].update(copy.deepcopy(data))
        else:
            self._docs[self.id] = copy.deepcopy(data)

    def create(self, data):
        if self.id in self._docs:
            raise AlreadyExists(f"Document already exists: {self._collection}/{self.id}")
        self.set(data)

    def update(self, data):
        if self.id not in self._docs:
            raise NotFound(f"No document to update: {self._collection}/{self.id}")
        self._docs[self.id].update(copy.deepcopy(data))

    def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, db, collection, filters=(), orders=()):
        self._db = db
        self._collection = collection
        self._filters = tuple(filters)
        self._orders = tuple(orders)

    def where(self, field, op, value):
        return FakeQuery(self._db, self._collection, self._filters + ((field, op, value),), self._orders)

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return FakeQuery(self._db, self._collection, self._filters, self._orders + ((field, direction),))

    @staticmethod
    def _matches(data, field, op, value):
        actual = data.get(field)
        if op == "==":
            return actual == value
        if op == "in":
            return actual in value
        raise NotImplementedError(op)

    def stream(self):
        docs = self._db.store.get(self._collection, {})
        results = [
            (doc_id, data) for doc_id, data in list(docs.items())
            if all(self._matches(data, field, op, value) for field, op, value in self._filters)
        ]
        for field, direction in reversed(self._orders):
            results.sort(key=lambda item: item[1].get(field),
                         reverse=direction == firestore.Query.DESCENDING)
        for doc_id, data in results:
            yield FakeSnapshot(doc_id, copy.deepcopy(data))

    def get(self):
        return list(self.stream())

    def count(self, alias=None):
        total = len(self.get())
        return SimpleNamespace(get=lambda: [[SimpleNamespace(alias=alias, value=total)]])


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        super().__init__(db, name)

    def document(self, doc_id=None):
        return FakeDocumentRef(self._db, self._collection, doc_id or uuid.uuid4().hex[:20])


class FakeBatch:
    def __init__(self):
        self._ops = []

    def create(self, ref, data):
        self._ops.append(("create", ref, data))

    def set(self, ref, data):
        self._ops.append(("set", ref, data))

    def update(self, ref, data):
        self._ops.append(("update", ref, data))

    def delete(self, ref):
        self._ops.append(("delete", ref, None))

    def commit(self):
        # All-or-nothing, like a Firestore batch
        for op, ref, _ in self._ops:
            if op == "create" and ref.get().exists:
                raise AlreadyExists(f"Document already exists: {ref.id}")
            if op == "update" and not ref.get().exists:
                raise NotFound(f"No document to update: {ref.id}")
        for op, ref, data in self._ops:
            if op == "delete":
                ref.delete()
            else:
                getattr(ref, op)(data)


class FakeFirestore:
    """Just enough of google.cloud.firestore.Client for the services."""

    def __init__(self):
        self.store = {}

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch()

    def docs(self, collection):
        return self.store.get(collection, {})


@pytest.fixture
def db():
    fake = FakeFirestore()
    with patch("dogmatch.gcp_clients.firestore_client", fake), \
            patch("dogmatch.gcp_clients.pubsub_publisher", None), \
            patch("dogmatch.gcp_clients.gmaps", None):
        yield fake


@pytest.fixture
def app(db):
    return create_app(TEST_CONFIG)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app, db):
    """Create a user document directly and return (user_id, auth headers)."""
    def _make(name="Alice", email=None, fcm_token=None):
        ref = db.collection("users").document()
        ref.set({
            "email": email or f"{name.lower()}-{ref.id}@example.com",
            "name": name,
            "preferences": {"notifications": True, "emailUpdates": False, "radius": 10},
            "fcmToken": fcm_token,
            "createdAt": None,
        })
        with app.app_context():
            token = create_access_token(identity=ref.id)
        return ref.id, {"Authorization": f"Bearer {token}"}
    return _make


def dog_payload(**overrides):
    payload = {
        "name": "Rex",
        "breed": "Labrador",
        "age": 3,
        "gender": "male",
        "photos": ["https://example.com/rex.jpg"],
        "description": "Friendly and playful",
        "location": {"latitude": 40.7128, "longitude": -74.0060},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_dog(client):
    """Create a dog through the API for the given caller."""
    def _make(headers, **overrides):
        response = client.post('/api/dogs', json=dog_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make
