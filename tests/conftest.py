"""
Shared test fixtures and configuration for pytest.
"""
import copy
import json
import os
import uuid

import pytest

# Set test environment before importing app modules
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["OPENAI_API_KEY"] = "test-openai-key"
os.environ["OPENAI_BASE_URL"] = "https://llm.test/v1"
os.environ["OPENAI_MODEL"] = "test-model"

import httpx
from httpx import AsyncClient, ASGITransport
from pymongo.errors import DuplicateKeyError

from brainsort.main import app
from brainsort.dependencies import get_identity_gateway, get_checklist_store
from brainsort.services.encryption import EncryptionService
from brainsort.services.generator import ChecklistGenerator, get_checklist_generator
from brainsort.services.identity import IdentityGateway
from brainsort.services.store import ChecklistStore


def _matches(document: dict, query: dict) -> bool:
    return all(document.get(key) == value for key, value in query.items())


class FakeCollection:
    """In-memory stand-in for the motor collection calls the app makes"""

    def __init__(self, unique=None):
        self.documents = []
        self.unique = unique or []

    async def find_one(self, query, projection=None):
        for document in self.documents:
            if _matches(document, query):
                found = copy.deepcopy(document)
                if projection and projection.get("_id") == 0:
                    found.pop("_id", None)
                return found
        return None

    async def insert_one(self, document):
        for field in self.unique:
            if any(existing.get(field) == document.get(field) for existing in self.documents):
                raise DuplicateKeyError(f"E11000 duplicate key error: {field}")
        document.setdefault("_id", uuid.uuid4().hex)
        self.documents.append(copy.deepcopy(document))

    async def update_one(self, query, update):
        for document in self.documents:
            if _matches(document, query):
                document.update(copy.deepcopy(update.get("$set", {})))
                return

    async def replace_one(self, query, replacement, upsert=False):
        for i, document in enumerate(self.documents):
            if _matches(document, query):
                replaced = copy.deepcopy(replacement)
                replaced["_id"] = document["_id"]
                self.documents[i] = replaced
                return
        if upsert:
            await self.insert_one(copy.deepcopy(replacement))

    async def delete_one(self, query):
        for i, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[i]
                return


class FakeLLM:
    """Answers chat completion requests with a canned reply and records them"""

    def __init__(self):
        self.reply = '["Buy milk", "Call Sam"]'
        self.status_code = 200
        self.error = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append({
            "url": str(request.url),
            "headers": request.headers,
            "json": json.loads(request.content),
        })
        if self.error is not None:
            raise self.error("simulated transport failure", request=request)
        return httpx.Response(
            self.status_code,
            json={"choices": [{"message": {"role": "assistant", "content": self.reply}}]},
        )


# ============ Storage Fixtures ============

@pytest.fixture
def users():
    return FakeCollection(unique=["email"])


@pytest.fixture
def sessions():
    return FakeCollection()


@pytest.fixture
def checklists():
    return FakeCollection(unique=["user_id"])


@pytest.fixture(scope="session")
def encryption():
    return EncryptionService("test-encryption-key")


@pytest.fixture
def gateway(users, sessions):
    return IdentityGateway(users, sessions)


@pytest.fixture
def store(checklists, encryption):
    return ChecklistStore(checklists, encryption)


# ============ LLM Fixtures ============

@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def generator(llm):
    return ChecklistGenerator(
        api_key="test-key",
        base_url="https://llm.test/v1",
        model="test-model",
        transport=httpx.MockTransport(llm.handler),
    )


# ============ API Fixtures ============

@pytest.fixture
async def test_client(users, sessions, checklists, encryption, generator):
    """Async client against the app with storage and LLM overridden"""
    app.dependency_overrides[get_identity_gateway] = lambda: IdentityGateway(users, sessions)
    app.dependency_overrides[get_checklist_store] = lambda: ChecklistStore(checklists, encryption)
    app.dependency_overrides[get_checklist_generator] = lambda: generator

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def signup_user(client: AsyncClient, email: str, password: str = "TestPassword123!") -> dict:
    """Sign up through the API and return token, headers and credentials"""
    credentials = {"email": email, "password": password}
    response = await client.post("/api/auth/signup", json=credentials)
    assert response.status_code == 200, f"Signup failed: {response.text}"
    # Tests pass the bearer header explicitly; the session cookie would hide missing auth
    client.cookies.clear()
    data = response.json()
    return {
        "token": data["access_token"],
        "user": data["user"],
        "credentials": credentials,
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
    }


@pytest.fixture
async def registered_user(test_client):
    return await signup_user(test_client, "sam@example.com")


@pytest.fixture
def make_user(test_client):
    """Factory for additional signed-up users"""
    async def _make_user(email: str) -> dict:
        return await signup_user(test_client, email)
    return _make_user
