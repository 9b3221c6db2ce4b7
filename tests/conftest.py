"""
tests/conftest.py -- Shared test fixtures for credkeeper tests.

This module provides:
  - hasher: a PasswordHasher at bcrypt's minimum cost (fast tests)
  - store / service: a fresh in-memory store and an AuthService wired to it
  - _patch_lifespan(): wires a test service into app.state, bypassing real startup
  - api_client: TestClient against the real app with an isolated store

BCRYPT_ROUNDS must be set before any api/ import so get_settings() picks up
the low test cost instead of the production default.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set before any core/api import so the cached Settings use it.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import InMemoryCredentialStore


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    """Minimum bcrypt cost. Shared across the session; the hasher is stateless."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def service(store: InMemoryCredentialStore, hasher: PasswordHasher) -> AuthService:
    return AuthService(store=store, hasher=hasher)


def _patch_lifespan(service: AuthService):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.auth_service = service
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(hasher: PasswordHasher) -> Generator[tuple[TestClient, AuthService], None, None]:
    """Yield (client, service) for API integration tests.

    One client and one store per test module. Tests that need a clean slate
    register usernames unique to the test.
    """
    service = AuthService(store=InMemoryCredentialStore(), hasher=hasher)
    app.router.lifespan_context = _patch_lifespan(service)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, service
