"""Shared pytest fixtures for the test suite.

Fixture overview
----------------
app             - TestingConfig app on in-memory SQLite, tables created
client          - Flask test client for ``app``
store           - parametrized over the ``sql`` and ``memory`` backends
coordinator     - asymmetric Coordinator over ``store``
make_*          - factories inserting valid records straight into ``store``
auth_headers    - ``auth_headers("admin")`` logs in a fresh user with that role
"""

from __future__ import annotations

import itertools

import pytest

from rentalcore import create_app, get_store
from rentalcore.config import TestingConfig
from rentalcore.coordinator import Coordinator
from rentalcore.extensions import db
from rentalcore.store import MemoryStore, SqlStore
from rentalcore.validation import validate

PASSWORD = "correct horse battery"

_seq = itertools.count(1)


# ── Application ──────────────────────────────────────────────────────────────


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# ── Stores and coordinator ───────────────────────────────────────────────────


@pytest.fixture(params=["sql", "memory"])
def store(request):
    """Each backend in turn; the SQL one runs inside the app context."""
    if request.param == "sql":
        request.getfixturevalue("app")
        return SqlStore()
    return MemoryStore()


@pytest.fixture
def coordinator(store):
    return Coordinator(store)


# ── Record factories ─────────────────────────────────────────────────────────


def tenant_data(**overrides) -> dict:
    n = next(_seq)
    data = {
        "firstName": "Anna",
        "lastName": f"Svensson {n}",
        "phoneNumber": "070-123 45 67",
        "email": f"anna{n}@example.com",
        "personalNumber": f"19800101-{n:04d}",
        "moveInDate": "2020-05-01",
        "resiliationDate": None,
        "apartmentId": None,
    }
    data.update(overrides)
    return data


def apartment_data(**overrides) -> dict:
    n = next(_seq)
    data = {
        "street": "Storgatan",
        "number": str(n),
        "apartmentNumber": "1101",
        "floor": "1",
        "postalCode": "111 22",
        "city": "Stockholm",
        "tenantId": None,
    }
    data.update(overrides)
    return data


def key_data(**overrides) -> dict:
    data = {
        "type": "door",
        "number": f"K-{next(_seq)}",
        "amount": 2,
        "apartmentId": None,
        "tenantId": None,
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_tenant(store):
    return lambda **kw: store.tenants.insert(tenant_data(**kw))


@pytest.fixture
def make_apartment(store):
    return lambda **kw: store.apartments.insert(apartment_data(**kw))


@pytest.fixture
def make_key(store):
    return lambda **kw: store.keys.insert(key_data(**kw))


# ── Auth ─────────────────────────────────────────────────────────────────────


def user_data(role: str, **overrides) -> dict:
    data = {
        "firstName": "Test",
        "lastName": role.title(),
        "email": f"{role}{next(_seq)}@example.com",
        "password": PASSWORD,
        "role": role,
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_user(app):
    """Insert a user with a hashed ``PASSWORD`` into the app's store."""
    def _make(role: str = "viewer", **overrides) -> dict:
        return get_store().users.insert(validate("users", user_data(role, **overrides)))
    return _make


@pytest.fixture
def auth_headers(client, make_user):
    def _headers(role: str) -> dict:
        user = make_user(role)
        resp = client.post("/api/auth/login", json={"email": user["email"], "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['access_token']}"}
    return _headers
