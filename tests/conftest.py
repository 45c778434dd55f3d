# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

Routes talk to Supabase through `get_supabase_client()`; tests swap it
for `FakeSupabase`, an in-memory stand-in for the PostgREST query builder
that supports the calls the routers make (select / eq / in_ / gte / lte /
or_ / order / limit / insert / update / upsert / delete / rpc).
"""

import copy
import uuid
from contextlib import ExitStack
from datetime import datetime, timezone
from typing import Generator
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from main import create_app
from dependencies.auth import get_now, get_session_resolver
from models.enums import UserRole
from models.user import Principal


FIXED_NOW = datetime(2025, 6, 5, 12, 0, 0, tzinfo=timezone.utc)

# Every module that imports get_supabase_client directly
SUPABASE_CONSUMERS = [
    "core.supabase_helpers",
    "core.supabase_client",
    "dependencies.auth",
    "routers.auth",
    "routers.admin",
    "routers.projects",
    "routers.properties",
    "routers.messages",
]


# -----------------------------------------------------
# In-memory Supabase
# -----------------------------------------------------
class FakeResult:
    def __init__(self, data):
        self.data = data


def _split_top_level(expr: str) -> list:
    parts, depth, current = [], 0, ""
    for ch in expr:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += ch
    parts.append(current)
    return parts


def _or_condition(part: str):
    column, op, value = part.split(".", 2)
    if op == "eq":
        return lambda row: str(row.get(column)) == value
    if op == "in":
        allowed = value.strip("()").split(",")
        return lambda row: str(row.get(column)) in allowed
    if op == "ilike":
        needle = value.strip("%").lower()
        return lambda row: needle in str(row.get(column) or "").lower()
    raise ValueError(f"unsupported or_ operator: {op}")


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None

    # --- builders ---
    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, data, returning="representation"):
        self.op, self.payload = "insert", data
        return self

    def upsert(self, data, on_conflict="id"):
        self.op, self.payload = "upsert", data
        return self

    def update(self, data, returning="representation"):
        self.op, self.payload = "update", data
        return self

    def delete(self):
        self.op = "delete"
        return self

    # --- filters ---
    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] <= value)
        return self

    def or_(self, expr):
        conditions = [_or_condition(p) for p in _split_top_level(expr)]
        self.filters.append(lambda row: any(c(row) for c in conditions))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    # --- execution ---
    def _matching(self):
        rows = self.db.tables.setdefault(self.table, [])
        return [r for r in rows if all(f(r) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if self.db.fail_tables.get(self.table):
            raise self.db.fail_tables[self.table]

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            row = self.db.new_row(self.payload)
            rows.append(row)
            return FakeResult([copy.deepcopy(row)])

        if self.op == "upsert":
            existing = next((r for r in rows if r.get("id") == self.payload.get("id")), None)
            if existing:
                existing.update(self.payload)
                return FakeResult([copy.deepcopy(existing)])
            row = self.db.new_row(self.payload)
            rows.append(row)
            return FakeResult([copy.deepcopy(row)])

        matched = self._matching()

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResult([copy.deepcopy(r) for r in matched])

        if self.op == "delete":
            self.db.tables[self.table] = [r for r in rows if r not in matched]
            return FakeResult([copy.deepcopy(r) for r in matched])

        if self.order_by:
            column, desc = self.order_by
            present = [r for r in matched if r.get(column) is not None]
            missing = [r for r in matched if r.get(column) is None]
            matched = sorted(present, key=lambda r: r[column], reverse=desc) + missing
        if self.limit_n is not None:
            matched = matched[: self.limit_n]
        return FakeResult([copy.deepcopy(r) for r in matched])


class FakeRpc:
    def __init__(self, db, name, params):
        self.db, self.name, self.params = db, name, params

    def execute(self):
        self.db.rpc_calls.append((self.name, self.params))
        return FakeResult(None)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.rpc_calls = []
        self.fail_tables = {}
        self.auth = Mock()

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params=None):
        return FakeRpc(self, name, params or {})

    def new_row(self, data):
        row = copy.deepcopy(data)
        row.setdefault("id", uuid.uuid4().hex)
        row.setdefault("created_at", FIXED_NOW.isoformat())
        return row

    def seed(self, table, *rows):
        for row in rows:
            self.tables.setdefault(table, []).append(self.new_row(row))
        return self.tables[table][-len(rows):]

    def rows(self, table):
        return self.tables.get(table, [])


# -----------------------------------------------------
# App / client
# -----------------------------------------------------
@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance with a fixed clock."""
    application = create_app()
    application.dependency_overrides[get_now] = lambda: FIXED_NOW
    return application


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_db() -> Generator[FakeSupabase, None, None]:
    """Patch every Supabase consumer with one shared in-memory database."""
    db = FakeSupabase()
    with ExitStack() as stack:
        for module in SUPABASE_CONSUMERS:
            stack.enter_context(patch(f"{module}.get_supabase_client", return_value=db))
        yield db


@pytest.fixture
def login(app):
    """
    Usage:
        login(seller_user)   # subsequent requests run as seller_user
        login(None)          # anonymous
    """
    def _login(principal):
        app.dependency_overrides[get_session_resolver] = lambda: (lambda: principal)
    return _login


# -----------------------------------------------------
# Principals
# -----------------------------------------------------
def make_principal(role: UserRole, user_id: str) -> Principal:
    return Principal(id=user_id, email=f"{user_id}@example.com", role=role)


@pytest.fixture
def admin_user():
    return make_principal(UserRole.admin, "admin-1")


@pytest.fixture
def seller_user():
    return make_principal(UserRole.seller, "seller-1")


@pytest.fixture
def other_seller():
    return make_principal(UserRole.seller, "seller-2")


@pytest.fixture
def agent_user():
    return make_principal(UserRole.agent, "agent-1")


@pytest.fixture
def buyer_user():
    return make_principal(UserRole.buyer, "buyer-1")
