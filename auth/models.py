"""
auth/models.py -- Domain dataclasses for credential entities.

Pattern: Data class (pure data container, zero logic beyond mapping).
Dataclasses own domain shape; the validator, store and service do the work.

All classes are frozen. A record handed out by the store can be shared
between threads without copying, and a concurrent reader can never observe
a half-built record.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    user = "user"
    admin = "admin"


@dataclass(frozen=True)
class AccountRecord:
    """A registered account as held by the credential store.

    username is the primary key and never changes once stored. salt and
    password_digest are excluded from repr so they cannot leak into logs or
    tracebacks; they never leave the auth/ package in any outward shape
    (see AccountView).
    """

    username: str
    email: str
    role: Role
    salt: bytes = field(repr=False)
    password_digest: bytes = field(repr=False)


@dataclass(frozen=True)
class AccountView:
    """Outward-facing representation of an account. Carries no secrets."""

    username: str
    email: str
    role: Role

    @classmethod
    def from_record(cls, record: AccountRecord) -> AccountView:
        return cls(username=record.username, email=record.email, role=record.role)


@dataclass(frozen=True)
class RegistrationRequest:
    username: str
    email: str
    role: Role
    password: str = field(repr=False)


@dataclass(frozen=True)
class LoginRequest:
    username: str
    password: str = field(repr=False)
