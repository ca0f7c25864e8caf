"""Pytest configuration and fixtures."""

import itertools
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from masterchef.api.dependencies import get_profile_store, get_recipe_generator, get_recipe_store
from masterchef.main import app
from masterchef.middleware.auth import get_token_verifier
from masterchef.services.recipe_generator import RecipeGenerator
from masterchef.services.recipe_store import RecipeStore
from masterchef.services.user_profiles import UserProfileStore

SAMPLE_RECIPE = """# Lemon Garlic Chicken

A bright weeknight dinner.

## Ingredients
- 4 chicken thighs
- 3 cloves garlic

## Instructions
1. Season the chicken.
2. Roast for **35 minutes**.
"""


# ---------------------------------------------------------------------------
# In-memory Firestore
# ---------------------------------------------------------------------------

class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.id = doc_id

    def get(self):
        if self.id.startswith("__") and self.id.endswith("__"):
            raise google_exceptions.InvalidArgument(f"Document id {self.id} is reserved")
        return FakeSnapshot(self, self.collection.docs.get(self.id))

    def set(self, data):
        self.collection.docs[self.id] = self.collection.db.resolve(data)

    def update(self, data):
        if self.id not in self.collection.docs:
            raise google_exceptions.NotFound(f"No document to update: {self.id}")
        self.collection.docs[self.id].update(self.collection.db.resolve(data))

    def delete(self):
        self.collection.docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, collection, filters=(), order=None):
        self.collection = collection
        self.filters = list(filters)
        self.order = order

    def where(self, filter):
        return FakeQuery(self.collection, self.filters + [filter], self.order)

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self.collection, self.filters, (field, direction))

    def stream(self):
        rows = [
            (doc_id, data)
            for doc_id, data in self.collection.docs.items()
            if all(self._matches(data, f) for f in self.filters)
        ]
        if self.order:
            field, direction = self.order
            rows.sort(key=lambda row: row[1].get(field), reverse=direction == "DESCENDING")
        for doc_id, _ in rows:
            yield FakeDocumentRef(self.collection, doc_id).get()

    @staticmethod
    def _matches(data, field_filter):
        assert field_filter.op_string == "=="
        return data.get(field_filter.field_path) == field_filter.value


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        super().__init__(self)
        self.db = db
        self.name = name
        self.docs = {}

    def document(self, doc_id=None):
        if doc_id and "/" in doc_id:
            raise ValueError("A document must have an even number of path elements")
        return FakeDocumentRef(self, doc_id or uuid.uuid4().hex[:20])

    def add(self, data):
        ref = self.document()
        ref.set(data)
        return self.docs[ref.id].get("createdAt"), ref


class FakeFirestore:
    """Just enough of the Firestore client for the stores."""

    def __init__(self):
        self.collections = {}
        self._clock = itertools.count(1)
        self._epoch = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def collection(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(self, name)
        return self.collections[name]

    def resolve(self, data):
        # Strictly increasing server timestamps keep ordering deterministic
        return {
            key: self._epoch + timedelta(seconds=next(self._clock)) if value is SERVER_TIMESTAMP else value
            for key, value in data.items()
        }


# ---------------------------------------------------------------------------
# Gemini stand-in
# ---------------------------------------------------------------------------

class FakeGemini:
    """Records every call; returns ``reply`` or raises ``error``."""

    def __init__(self, reply=SAMPLE_RECIPE, error=None, configured=True):
        self.reply = reply
        self.error = error
        self.configured = configured
        self.calls = []

    @property
    def is_configured(self):
        return self.configured

    async def generate_text(self, *, system_instruction, user_message):
        self.calls.append({"system_instruction": system_instruction, "user_message": user_message})
        if self.error is not None:
            raise self.error
        return self.reply


def fake_token_verifier(token):
    """Accepts ``token-<uid>`` and claims ``<uid>@example.com``."""
    if not token.startswith("token-"):
        raise ValueError("invalid token")
    uid = token[len("token-"):]
    return {"uid": uid, "email": f"{uid}@example.com"}


def auth_headers(uid):
    return {"Authorization": f"Bearer token-{uid}"}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def recipe_store(fake_db):
    return RecipeStore(db=fake_db)


@pytest.fixture
def profile_store(fake_db):
    return UserProfileStore(db=fake_db)


@pytest.fixture
def override_dependencies(fake_gemini, recipe_store, profile_store):
    """Point the app at the in-memory fakes for the duration of a test."""
    app.dependency_overrides[get_recipe_generator] = lambda: RecipeGenerator(gemini_service=fake_gemini)
    app.dependency_overrides[get_recipe_store] = lambda: recipe_store
    app.dependency_overrides[get_profile_store] = lambda: profile_store
    app.dependency_overrides[get_token_verifier] = lambda: fake_token_verifier
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_dependencies):
    """Create test client."""
    return TestClient(override_dependencies)
