"""Unit tests for auth/service.py -- register and login orchestration.

Covers:
- register then login round trip yields Authenticated
- Registered outcome carries no password, salt or digest
- every later register for a taken username yields Conflict
- unknown username and wrong password yield the same Unauthorized
- concurrent registrations for one username: one Registered, N-1 Conflict
- the atomic insert, not the pre-check, decides uniqueness (fake store)
- internal hashing faults propagate and commit nothing
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict
from unittest.mock import patch

import pytest

from auth.errors import AuthenticationError, ConflictError, ValidationError
from auth.models import AccountRecord, AccountView, Role
from auth.outcomes import Authenticated, Conflict, Invalid, Registered, Unauthorized
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import InMemoryCredentialStore

VALID_REGISTRATION = {
    "username": "alice",
    "email": "alice@example.com",
    "role": "user",
    "password": "Secret!1",
}


def _login(username: str = "alice", password: str = "Secret!1") -> dict:
    return {"username": username, "password": password}


class TestRegister:
    def test_register_then_login(self, service: AuthService):
        assert isinstance(service.register(VALID_REGISTRATION), Registered)
        assert service.login(_login()) == Authenticated("alice")

    def test_registered_outcome_has_no_secrets(self, service: AuthService, store: InMemoryCredentialStore):
        outcome = service.register(VALID_REGISTRATION)
        assert outcome == Registered(AccountView(username="alice", email="alice@example.com", role=Role.user))

        record = store.find_by_username("alice")
        dumped = str(asdict(outcome.account))
        assert "Secret!1" not in dumped
        assert record.salt.decode() not in dumped
        assert record.password_digest.decode() not in dumped

    def test_stored_record_holds_salt_and_digest(self, service: AuthService, store: InMemoryCredentialStore):
        service.register(VALID_REGISTRATION)
        record = store.find_by_username("alice")
        assert record.password_digest.startswith(record.salt)
        assert service.hasher.verify("Secret!1", record.password_digest)

    def test_duplicate_username_conflicts_regardless_of_other_fields(self, service: AuthService):
        service.register(VALID_REGISTRATION)
        again = dict(VALID_REGISTRATION, email="other@example.com", role="admin", password="Other?Pass")
        assert service.register(again) == Conflict("alice")
        assert service.register(VALID_REGISTRATION) == Conflict("alice")

    def test_conflict_keeps_original_credentials(self, service: AuthService):
        service.register(VALID_REGISTRATION)
        service.register(dict(VALID_REGISTRATION, password="Other?Pass"))
        assert service.login(_login()) == Authenticated("alice")
        assert service.login(_login(password="Other?Pass")) == Unauthorized()

    def test_invalid_input_stores_nothing(self, service: AuthService, store: InMemoryCredentialStore):
        outcome = service.register(dict(VALID_REGISTRATION, username="ab"))
        assert isinstance(outcome, Invalid)
        assert "username" in outcome.reason
        assert store.count() == 0

    def test_email_uniqueness_not_enforced(self, service: AuthService):
        service.register(VALID_REGISTRATION)
        outcome = service.register(dict(VALID_REGISTRATION, username="alice2"))
        assert isinstance(outcome, Registered)

    def test_hashing_fault_propagates_and_commits_nothing(
        self, service: AuthService, store: InMemoryCredentialStore
    ):
        with patch.object(service.hasher, "generate_salt", side_effect=OSError("entropy source unavailable")):
            with pytest.raises(OSError):
                service.register(VALID_REGISTRATION)
        assert store.count() == 0
        assert isinstance(service.register(VALID_REGISTRATION), Registered)


class TestLogin:
    def test_wrong_password_and_unknown_user_are_identical(self, service: AuthService):
        service.register(VALID_REGISTRATION)
        wrong_password = service.login(_login(password="Wrong!pass"))
        unknown_user = service.login(_login(username="mallory"))
        assert wrong_password == unknown_user == Unauthorized()
        assert str(wrong_password.to_error()) == str(unknown_user.to_error())

    def test_unknown_user_still_runs_bcrypt(self, service: AuthService):
        with patch.object(service.hasher, "burn_verify", wraps=service.hasher.burn_verify) as burn:
            service.login(_login(username="mallory"))
        burn.assert_called_once_with("Secret!1")

    def test_invalid_login_body(self, service: AuthService):
        outcome = service.login({"username": "al", "password": "Secret!1"})
        assert isinstance(outcome, Invalid)

    def test_login_is_case_sensitive_on_username(self, service: AuthService):
        service.register(VALID_REGISTRATION)
        assert service.login(_login(username="Alice")) == Unauthorized()


class TestOutcomeErrors:
    def test_failure_outcomes_map_to_taxonomy(self, service: AuthService):
        invalid = service.register({})
        assert isinstance(invalid.to_error(), ValidationError)
        assert invalid.to_error().message == invalid.reason
        assert invalid.to_error().detail == "username, email, role, password"
        assert isinstance(Conflict("alice").to_error(), ConflictError)
        assert isinstance(Unauthorized().to_error(), AuthenticationError)

    def test_status_codes(self):
        assert ValidationError.status_code == 400
        assert ConflictError.status_code == 409
        assert AuthenticationError.status_code == 401


class TestConcurrency:
    def test_concurrent_registrations_single_winner(self, service: AuthService, store: InMemoryCredentialStore):
        workers = 12
        barrier = threading.Barrier(workers)

        def attempt(i: int):
            barrier.wait()
            return service.register(dict(VALID_REGISTRATION, username="racer", email=f"r{i}@example.com"))

        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(attempt, range(workers)))

        assert sum(isinstance(o, Registered) for o in outcomes) == 1
        assert sum(isinstance(o, Conflict) for o in outcomes) == workers - 1
        assert store.count() == 1

    def test_hashing_does_not_block_other_usernames(self, hasher: PasswordHasher):
        """A registration stuck in hash() must not stop another username from registering."""
        store = InMemoryCredentialStore()
        started = threading.Event()
        release = threading.Event()

        class SlowHasher(PasswordHasher):
            def hash(self, plaintext, salt):
                if plaintext == "Slow!pass":
                    started.set()
                    release.wait(timeout=5)
                return super().hash(plaintext, salt)

        service = AuthService(store=store, hasher=SlowHasher(rounds=4))
        with ThreadPoolExecutor(max_workers=1) as pool:
            slow = pool.submit(service.register, dict(VALID_REGISTRATION, username="slowpoke", password="Slow!pass"))
            assert started.wait(timeout=5)
            assert isinstance(service.register(VALID_REGISTRATION), Registered)
            release.set()
            assert isinstance(slow.result(timeout=5), Registered)
        assert store.count() == 2


class _RacingStore(InMemoryCredentialStore):
    """Fake store whose lookups always miss, as if a rival insert landed after the pre-check."""

    def find_by_username(self, username: str) -> AccountRecord | None:
        return None


def test_insert_decides_uniqueness_not_precheck(hasher: PasswordHasher):
    store = _RacingStore()
    service = AuthService(store=store, hasher=hasher)
    assert isinstance(service.register(VALID_REGISTRATION), Registered)
    assert service.register(VALID_REGISTRATION) == Conflict("alice")
    assert store.count() == 1
