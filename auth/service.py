"""
auth/service.py -- Registration and login orchestration.

register: validate -> (cheap duplicate pre-check) -> salt + hash -> atomic
          insert_if_absent. The pre-check only saves a bcrypt round for
          obvious duplicates; the uniqueness decision is the store's atomic
          insert, so two racing registrations for one username still yield
          exactly one Registered and one Conflict.

login:    validate -> lookup -> verify. An unknown username and a wrong
          password produce the same Unauthorized outcome, and both pay for
          one bcrypt verify so timing does not separate them.

No lock is held while hashing. Internal faults (bcrypt, randomness source)
are not caught here; nothing has been committed to the store when they
happen, and the API layer reports them as internal errors.
"""

from __future__ import annotations

import logging
from typing import Any

from auth.models import AccountRecord, AccountView
from auth.outcomes import (
    Authenticated,
    Conflict,
    Invalid,
    LoginOutcome,
    Registered,
    RegisterOutcome,
    Unauthorized,
)
from auth.passwords import PasswordHasher
from auth.store import CredentialStore
from auth.validation import ValidationFailure, validate_login, validate_registration

logger = logging.getLogger("credkeeper.auth")


class AuthService:
    def __init__(self, *, store: CredentialStore, hasher: PasswordHasher) -> None:
        self.store = store
        self.hasher = hasher

    def register(self, raw: Any) -> RegisterOutcome:
        request = validate_registration(raw)
        if isinstance(request, ValidationFailure):
            logger.info("Registration rejected: %s", request.reason)
            return Invalid(request)

        if self.store.find_by_username(request.username) is not None:
            logger.info("Registration conflict for username %r", request.username)
            return Conflict(request.username)

        salt = self.hasher.generate_salt()
        record = AccountRecord(
            username=request.username,
            email=request.email,
            role=request.role,
            salt=salt,
            password_digest=self.hasher.hash(request.password, salt),
        )
        if not self.store.insert_if_absent(request.username, record):
            # Lost the race against a concurrent registration.
            logger.info("Registration conflict for username %r", request.username)
            return Conflict(request.username)

        logger.info("Registered %r (role=%s)", record.username, record.role.value)
        return Registered(AccountView.from_record(record))

    def login(self, raw: Any) -> LoginOutcome:
        request = validate_login(raw)
        if isinstance(request, ValidationFailure):
            logger.info("Login rejected: %s", request.reason)
            return Invalid(request)

        record = self.store.find_by_username(request.username)
        if record is None:
            self.hasher.burn_verify(request.password)
            logger.info("Login failed for %r", request.username)
            return Unauthorized()
        if not self.hasher.verify(request.password, record.password_digest):
            logger.info("Login failed for %r", request.username)
            return Unauthorized()

        logger.info("Login succeeded for %r", record.username)
        return Authenticated(record.username)
