# tests/conftest.py
"""
Shared fixtures.

FakeSupabase stands in for `supabase.AsyncClient`:
  - `table(name)` records the chained PostgREST calls of each query
  - responses are scripted per table with `respond()`, in call order
  - with nothing scripted, a query behaves like an empty table:
    select -> [], single() -> PGRST116, insert -> echoes the payload
  - `auth` mimics the async GoTrue client used by AuthService
"""

import os

# Settings are read at import time by storefront.main
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import asyncio
import time
import uuid
from collections import defaultdict, deque
from dataclasses import dataclass
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from supabase import PostgrestAPIError

from storefront.core.config import get_settings
from storefront.core.notifications import Notifier
from storefront.main import create_app
from storefront.repositories.profile_repo import ProfileRepository
from storefront.schemas.product import CategoryRef, ProductRead
from storefront.services.auth_service import AuthService

TOKEN_SECRET = "test-jwt-secret"

OPERATIONS = ("select", "insert", "update", "delete")


def api_error(code: str, message: str = "error", details: Any = None) -> PostgrestAPIError:
    return PostgrestAPIError(
        {"message": message, "code": code, "details": details, "hint": None}
    )


# ---- PostgREST ----


@dataclass
class RecordedQuery:
    table: str
    chain: list[tuple[str, tuple, dict]]

    @property
    def methods(self) -> list[str]:
        return [name for name, _, _ in self.chain]

    @property
    def operation(self) -> str | None:
        return next((m for m in self.methods if m in OPERATIONS), None)

    @property
    def payload(self) -> Any:
        for name, args, _ in self.chain:
            if name in ("insert", "update"):
                return args[0]
        return None

    @property
    def filters(self) -> list[tuple[str, Any]]:
        return [args for name, args, _ in self.chain if name == "eq"]

    def args_of(self, method: str) -> list[tuple]:
        return [args for name, args, _ in self.chain if name == method]


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._chain: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        def call(*args, **kwargs):
            self._chain.append((name, args, kwargs))
            return self

        return call

    async def execute(self):
        recorded = RecordedQuery(self._table, list(self._chain))
        self._db.calls.append(recorded)
        outcome = self._db.next_outcome(recorded)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(data=outcome, count=None)


# ---- GoTrue ----


def make_user(email: str = "shopper@example.com", user_id: str | None = None):
    return SimpleNamespace(id=user_id or str(uuid.uuid4()), email=email)


def make_session(user, expires_in: int = 3600):
    expires_at = int(time.time()) + expires_in
    token = jwt.encode(
        {"sub": user.id, "email": user.email, "exp": expires_at, "aud": "authenticated"},
        TOKEN_SECRET,
        algorithm="HS256",
    )
    return SimpleNamespace(
        access_token=token,
        refresh_token="refresh-token",
        expires_at=expires_at,
        user=user,
    )


class FakeSubscription:
    def __init__(self, listeners: list, callback: Callable):
        self._listeners = listeners
        self._callback = callback

    def unsubscribe(self) -> None:
        if self._callback in self._listeners:
            self._listeners.remove(self._callback)


class FakeAuth:
    """
    Registered users by email. `errors[method]` makes that call raise;
    `confirm_email` makes sign_up return a user without a session;
    `observer` runs inside every auth request; `holds[method]` is an
    asyncio.Event the call waits on before answering.
    """

    def __init__(self):
        self.session = None
        self.users: dict[str, Any] = {}
        self.listeners: list[Callable] = []
        self.errors: dict[str, Exception] = {}
        self.confirm_email = False
        self.observer: Callable[[], None] | None = None
        self.holds: dict[str, asyncio.Event] = {}
        self.calls: list[str] = []

    async def _enter(self, method: str) -> None:
        self.calls.append(method)
        if self.observer:
            self.observer()
        if method in self.holds:
            await self.holds[method].wait()
        if method in self.errors:
            raise self.errors[method]

    def emit(self, event: str, session) -> None:
        for callback in list(self.listeners):
            callback(event, session)

    def on_auth_state_change(self, callback: Callable):
        self.listeners.append(callback)
        return FakeSubscription(self.listeners, callback)

    async def get_session(self):
        await self._enter("get_session")
        return self.session

    async def sign_up(self, credentials: dict):
        await self._enter("sign_up")
        user = self.users.setdefault(credentials["email"], make_user(credentials["email"]))
        if self.confirm_email:
            return SimpleNamespace(user=user, session=None)

        self.session = make_session(user)
        self.emit("SIGNED_IN", self.session)
        return SimpleNamespace(user=user, session=self.session)

    async def sign_in_with_password(self, credentials: dict):
        await self._enter("sign_in_with_password")
        user = self.users.setdefault(credentials["email"], make_user(credentials["email"]))
        self.session = make_session(user)
        self.emit("SIGNED_IN", self.session)
        return SimpleNamespace(user=user, session=self.session)

    async def sign_out(self):
        await self._enter("sign_out")
        self.session = None
        self.emit("SIGNED_OUT", None)


class FakeSupabase:
    def __init__(self):
        self.auth = FakeAuth()
        self.calls: list[RecordedQuery] = []
        self._outcomes: dict[str, deque] = defaultdict(deque)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def respond(self, table: str, *outcomes: Any) -> None:
        """Queue results (row data or a PostgrestAPIError) for `table`."""
        self._outcomes[table].extend(outcomes)

    def next_outcome(self, query: RecordedQuery) -> Any:
        queued = self._outcomes[query.table]
        if queued:
            return queued.popleft()
        if "single" in query.methods:
            return api_error("PGRST116", "JSON object requested, multiple (or no) rows returned")
        if query.operation == "insert":
            payload = query.payload
            return payload if isinstance(payload, list) else [payload]
        return []

    def queries(self, table: str, operation: str | None = None) -> list[RecordedQuery]:
        return [
            q for q in self.calls
            if q.table == table and (operation is None or q.operation == operation)
        ]


# ---- Fixtures ----


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def auth(supabase, notifier) -> AuthService:
    return AuthService(supabase, ProfileRepository(supabase), notifier)


@pytest.fixture
def make_product() -> Callable[..., ProductRead]:
    def _make(
        product_id: str = "p-1",
        price: str = "19.99",
        category: str | None = None,
        **fields: Any,
    ) -> ProductRead:
        return ProductRead(
            product_id=product_id,
            title=fields.pop("title", f"Product {product_id}"),
            price=Decimal(price),
            category=CategoryRef(id=1, name=category) if category else None,
            **fields,
        )

    return _make


@pytest.fixture
def profile_row() -> Callable[..., dict]:
    def _row(user_id: str, **fields: Any) -> dict:
        return {
            "profile_id": user_id,
            "username": "",
            "avatar_url": "",
            "created_at": "2024-05-01T10:00:00+00:00",
            **fields,
        }

    return _row


@pytest.fixture
def jwt_secret(monkeypatch):
    """Turn on token verification for one test."""
    monkeypatch.setenv("SUPABASE_JWT_SECRET", TOKEN_SECRET)
    get_settings.cache_clear()
    yield TOKEN_SECRET
    monkeypatch.delenv("SUPABASE_JWT_SECRET")
    get_settings.cache_clear()


@pytest.fixture
def client(supabase):
    """API client; entering it runs the app lifespan against the fake."""
    app = create_app(supabase=supabase)
    with TestClient(app) as c:
        yield c
