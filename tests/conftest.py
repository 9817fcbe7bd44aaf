"""
Shared fixtures.

The API runs against an in-memory SQLite database (one shared connection via
StaticPool) and Firebase token verification is replaced by a fake that
treats the bearer token as the uid. Tokens starting with "bad" are rejected.
"""

import os

# must be set before the app modules read settings
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("FIREBASE_CREDENTIALS", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import auth as core_auth
from app.db import get_db
from app.domains.realtime.router import realtime_router
from app.main import app
from app.models import Base


def fake_verify_firebase_token(id_token):
    if not id_token or id_token.startswith("bad"):
        return None
    return {"uid": id_token, "email": f"{id_token}@example.com"}


def auth(uid):
    return {"Authorization": f"Bearer {uid}"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    """Session for arranging rows and asserting on them directly."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(core_auth, "verify_firebase_token", fake_verify_firebase_token)
    # WebSocket feeds open their own short-lived sessions
    monkeypatch.setattr(realtime_router, "SessionLocal", session_factory)
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Sign up a user through the API and return its uid."""

    def _make(uid, role="user", name=None):
        res = client.post(
            "/api/v1/auth/signup",
            json={"name": name or f"Usuario {uid}", "role": role},
            headers=auth(uid),
        )
        assert res.status_code == 201, res.text
        return uid

    return _make


@pytest.fixture
def walker(make_user):
    return make_user("walker-1", role="admin", name="Ana Paseadora")


@pytest.fixture
def owner(make_user):
    return make_user("client-1", name="Carlos Cliente")


@pytest.fixture
def affiliate(client):
    """Link a client to a walker through a one-time affiliation code."""

    def _affiliate(client_uid, walker_uid):
        code = client.post("/api/v1/affiliations/codes", headers=auth(walker_uid)).json()["qr"]["code"]
        res = client.post("/api/v1/affiliations/scan", json={"code": code}, headers=auth(client_uid))
        assert res.status_code == 201, res.text

    return _affiliate
