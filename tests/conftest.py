"""
Shared fixtures: an in-memory stand-in for the motor collections, a fake
chat model for the structured flows and a TestClient with the JWT
dependency overridden.
"""

import copy
from types import SimpleNamespace
from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app.collections import ai_workflow as ai_workflow_collection
from app.collections import community as community_collection
from app.collections import crop_monitor as crop_monitor_collection
from app.collections import diagnosis as diagnosis_collection
from app.collections import insurance as insurance_collection
from app.collections import user as user_collection
from app.core.security import verify_jwt
from app.models.user import User
from app.services import structured_flow

TEST_USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def _field_matches(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and "$ne" in condition:
        return not _field_matches(value, condition["$ne"])
    if isinstance(value, list):
        return condition in value
    return value == condition


def _matches(document: dict, query: dict) -> bool:
    return all(_field_matches(document.get(key), condition) for key, condition in query.items())


class FakeCursor:
    def __init__(self, documents: list[dict]):
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents = sorted(
            self._documents, key=lambda doc: doc.get(key) or "", reverse=direction < 0
        )
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._documents = self._documents[:count]
        return self

    def __aiter__(self):
        self._iterator = iter(self._documents)
        return self

    async def __anext__(self) -> dict:
        try:
            return copy.deepcopy(next(self._iterator))
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """The subset of AsyncIOMotorCollection used by app.collections."""

    def __init__(self):
        self.documents: list[dict] = []

    async def find_one(self, query: dict):
        for document in self.documents:
            if _matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query: dict | None = None) -> FakeCursor:
        return FakeCursor([doc for doc in self.documents if _matches(doc, query or {})])

    async def insert_one(self, document: dict):
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document.get("_id"))

    async def replace_one(self, query: dict, document: dict, upsert: bool = False):
        for index, existing in enumerate(self.documents):
            if _matches(existing, query):
                self.documents[index] = copy.deepcopy(document)
                return SimpleNamespace(matched_count=1, modified_count=1)
        if upsert:
            self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def update_one(self, query: dict, update: dict):
        for document in self.documents:
            if not _matches(document, query):
                continue
            for key, amount in update.get("$inc", {}).items():
                document[key] = document.get(key, 0) + amount
            for key, value in update.get("$addToSet", {}).items():
                values = document.setdefault(key, [])
                if value not in values:
                    values.append(value)
            for key, value in update.get("$push", {}).items():
                document.setdefault(key, []).append(value)
            return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query: dict):
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query: dict):
        kept = [doc for doc in self.documents if not _matches(doc, query)]
        deleted = len(self.documents) - len(kept)
        self.documents = kept
        return SimpleNamespace(deleted_count=deleted)


@pytest.fixture
def fake_db(monkeypatch) -> dict[str, FakeCollection]:
    collections = {
        name: FakeCollection()
        for name in (
            "user",
            "ai_workflow",
            "ai_workflow_event",
            "posts",
            "comments",
            "insurance_policies",
            "insurance_claims",
            "monitored_crops",
            "crop_snaps",
            "diagnoses",
        )
    }
    getters = [
        (user_collection, "get_user_collection", "user"),
        (ai_workflow_collection, "get_ai_workflow_collection", "ai_workflow"),
        (ai_workflow_collection, "get_ai_workflow_event_collection", "ai_workflow_event"),
        (community_collection, "get_post_collection", "posts"),
        (community_collection, "get_comment_collection", "comments"),
        (insurance_collection, "get_insurance_policy_collection", "insurance_policies"),
        (insurance_collection, "get_insurance_claim_collection", "insurance_claims"),
        (crop_monitor_collection, "get_monitored_crop_collection", "monitored_crops"),
        (crop_monitor_collection, "get_crop_snap_collection", "crop_snaps"),
        (diagnosis_collection, "get_diagnosis_collection", "diagnoses"),
    ]
    for module, getter, name in getters:
        monkeypatch.setattr(module, getter, lambda name=name: collections[name])
    return collections


@pytest.fixture
async def test_user(fake_db) -> User:
    user = User(
        id=TEST_USER_ID,
        phone="9876543210",
        name="Ramesh",
        language="Hindi",
        photo_url="user-content/user-1/profile/photo.jpg",
    )
    await user_collection.save_user(user)
    return user


class FakeChatModel:
    """
    Stands in for ChatGoogleGenerativeAI in structured flows. Queued
    responses are returned in order; `error` is raised instead when set.
    """

    def __init__(self):
        self.responses: list[Any] = []
        self.error: Exception | None = None
        self.calls: list[list] = []
        self.schemas: list[type] = []

    def queue(self, *responses: Any) -> "FakeChatModel":
        self.responses.extend(responses)
        return self

    def with_structured_output(self, schema, method=None):
        self.schemas.append(schema)
        return self

    async def ainvoke(self, messages, **kwargs):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.responses.pop(0) if self.responses else None

    def last_input_text(self) -> str:
        return self.calls[-1][-1].content[0]["text"]


@pytest.fixture
def fake_llm(monkeypatch) -> FakeChatModel:
    model = FakeChatModel()
    monkeypatch.setattr(structured_flow, "get_chat_model", lambda *args, **kwargs: model)
    return model


@pytest.fixture
def mock_http(monkeypatch) -> Callable:
    """
    Routes a service's `_http_client()` through an httpx.MockTransport.
    Returns the list of captured requests.
    """

    def install(module, handler: Callable[[httpx.Request], httpx.Response]) -> list:
        captured: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return handler(request)

        monkeypatch.setattr(
            module,
            "_http_client",
            lambda: httpx.AsyncClient(transport=httpx.MockTransport(_handler)),
        )
        return captured

    return install


@pytest.fixture
def client(fake_db):
    from app.main import app

    app.dependency_overrides[verify_jwt] = lambda: {"sub": TEST_USER_ID, "language": "English"}
    yield TestClient(app)
    app.dependency_overrides.clear()
