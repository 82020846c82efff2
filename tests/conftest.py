"""
tests/conftest.py -- Shared test fixtures for RizzMaster.

This module provides:
  - make_store(): creates an isolated in-memory UserStore
  - _patch_lifespan(): wires a test store into app.state, bypassing real startup
  - api_client: TestClient against the real app with an isolated store

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the TestClient because route handlers run in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread. The named URI format shares one in-memory instance across all
connections in the same process.

DEBUG and LOGIN_RATE_LIMIT must be set before any app import: settings are
read once, and the login limit is bound when the route module is imported.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# Set before any auth/core import so get_settings() auto-generates SECRET_KEY
# and the login limit does not trip across the whole test session.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import UserStore


def make_store(name: str) -> UserStore:
    """Return a UserStore on a named shared-memory SQLite database."""
    return UserStore(db_url=f"sqlite:///file:test_auth_{name}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(user_store: UserStore):
    """Return a lifespan that installs user_store instead of the configured DB.

    The purge_task is a long-sleeping coroutine: shutdown calls .cancel() on
    it, which needs a real asyncio.Task.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.purge_task = asyncio.create_task(asyncio.sleep(99999))
        yield
        app.state.purge_task.cancel()

    return test_lifespan


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    """Fresh single-connection in-memory store for unit tests."""
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, UserStore], None, None]:
    """Yield (client, store) for HTTP integration tests.

    One client per test module; the database name is derived from the module
    so modules never see each other's users. Tests must use distinct emails
    and start from an empty cookie jar (see the clean_cookies fixture).
    """
    user_store = make_store(request.module.__name__.replace(".", "_"))
    app.router.lifespan_context = _patch_lifespan(user_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, user_store

    user_store.close()


@pytest.fixture
def client(api_client) -> TestClient:
    """The module's TestClient with an emptied cookie jar."""
    c, _store = api_client
    c.cookies.clear()
    return c
