"""Shared fixtures: an app wired to in-memory stores instead of MongoDB."""

import copy
from datetime import datetime, timezone
from typing import Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from marketplace.app import create_app
from marketplace.auth.blacklist import TokenBlacklist, get_token_blacklist
from marketplace.auth.helpers import create_access_token, hash_password
from marketplace.rbac import Role
from marketplace.users.repository import get_user_repository
from marketplace.vendors.repository import get_vendor_repository

PASSWORD = "correct-horse-battery"


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryUserRepository:
    """Same interface as UserRepository, backed by a dict."""

    def __init__(self):
        self.docs: dict[str, dict] = {}

    def add(self, doc: dict) -> dict:
        doc = {"_id": ObjectId(), "is_deleted": False, "is_active": True, **doc}
        self.docs[str(doc["_id"])] = doc
        return copy.deepcopy(doc)

    def _live(self, user_id: str) -> Optional[dict]:
        doc = self.docs.get(str(user_id))
        if doc is None or doc.get("is_deleted"):
            return None
        return doc

    async def find_by_id(self, user_id: str) -> Optional[dict]:
        doc = self._live(user_id)
        return copy.deepcopy(doc) if doc else None

    async def find_by_email(self, email: str) -> Optional[dict]:
        for doc in self.docs.values():
            if doc.get("email") == email.lower() and not doc.get("is_deleted"):
                return copy.deepcopy(doc)
        return None

    async def create(self, data: dict) -> dict:
        now = datetime.now(timezone.utc)
        return self.add({**data, "email": data["email"].lower(), "created_at": now})

    async def list(self, limit: int = 20, offset: int = 0):
        live = [d for d in self.docs.values() if not d.get("is_deleted")]
        return copy.deepcopy(live[offset : offset + limit]), len(live)

    async def update(self, user_id: str, fields: dict) -> Optional[dict]:
        doc = self._live(user_id)
        if doc is None:
            return None
        doc.update(fields)
        return copy.deepcopy(doc)

    async def delete(self, user_id: str) -> bool:
        return await self.update(user_id, {"is_deleted": True, "is_active": False}) is not None


class InMemoryVendorRepository:
    def __init__(self):
        self.docs: dict[str, dict] = {}

    def add(self, doc: dict) -> dict:
        doc = {"_id": ObjectId(), "is_approved": False, "is_suspended": False, **doc}
        self.docs[str(doc["_id"])] = doc
        return copy.deepcopy(doc)

    async def find_by_id(self, vendor_id: str) -> Optional[dict]:
        doc = self.docs.get(str(vendor_id))
        return copy.deepcopy(doc) if doc else None

    async def find_by_user_id(self, user_id: str) -> Optional[dict]:
        for doc in self.docs.values():
            if doc.get("user_id") == str(user_id):
                return copy.deepcopy(doc)
        return None

    async def find_by_approval_token(self, token: str) -> Optional[dict]:
        if not token:
            return None
        for doc in self.docs.values():
            if doc.get("approval_token") == token:
                return copy.deepcopy(doc)
        return None

    async def create(self, data: dict) -> dict:
        return self.add(data)

    async def list(self, approved: Optional[bool] = None, limit: int = 20, offset: int = 0):
        docs = [
            d for d in self.docs.values()
            if approved is None or d.get("is_approved") == approved
        ]
        return copy.deepcopy(docs[offset : offset + limit]), len(docs)

    async def update(self, vendor_id: str, fields: dict) -> Optional[dict]:
        doc = self.docs.get(str(vendor_id))
        if doc is None:
            return None
        doc.update(fields)
        return copy.deepcopy(doc)


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(PASSWORD)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def vendors() -> InMemoryVendorRepository:
    return InMemoryVendorRepository()


@pytest.fixture
def blacklist() -> TokenBlacklist:
    return TokenBlacklist()


@pytest.fixture
def app(users, vendors, blacklist):
    app = create_app(connect_database=False)
    app.dependency_overrides[get_user_repository] = lambda: users
    app.dependency_overrides[get_vendor_repository] = lambda: vendors
    app.dependency_overrides[get_token_blacklist] = lambda: blacklist
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_user(users, password_hash):
    """Insert a user and return ``(doc, access_token)``."""

    def _make(role: Role = Role.CUSTOMER, permissions=None, **fields):
        doc = users.add(
            {
                "name": f"{role.value.title()} User",
                "email": f"{role.value.lower()}-{len(users.docs)}@example.com",
                "password": password_hash,
                "role": role.value,
                "permissions": [p.value for p in permissions or []],
                **fields,
            }
        )
        token = create_access_token(str(doc["_id"]), role.value, doc["permissions"])
        return doc, token

    return _make


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
