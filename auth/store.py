"""
auth/store.py -- Volatile credential store.

Pattern: Repository behind a Protocol port. AuthService depends on the
CredentialStore protocol, never on a concrete class, so tests can inject a
fake and the insert-if-absent contract is part of the interface instead of
an accident of single-threaded execution.

Concurrency:
  InMemoryCredentialStore guards its dict with one threading.Lock. Every
  read and the combined "is the key free? then write" step run under that
  lock, so two registrations racing for the same unseen username produce
  exactly one insert. The lock is held only for dict operations; password
  hashing happens before insert_if_absent() is called.

  Records are frozen dataclasses, so a reader that gets one back from
  find_by_username() always sees it fully constructed.

Lifetime: process only. Nothing is written to disk.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import threading
from typing import Protocol

from email_validator import EmailNotValidError

from auth.models import AccountRecord
from auth.validation import normalize_email


class CredentialStore(Protocol):
    """Port for account lookup and the uniqueness-enforcing insert."""

    def find_by_username(self, username: str) -> AccountRecord | None: ...

    def find_by_email(self, email: str) -> AccountRecord | None: ...

    def insert_if_absent(self, username: str, record: AccountRecord) -> bool: ...

    def count(self) -> int: ...


class InMemoryCredentialStore:
    """Thread-safe dict-backed store keyed by username.

    Usage:
        store = InMemoryCredentialStore()
        store.insert_if_absent("alice", record)   # True
        store.insert_if_absent("alice", other)    # False, first record kept
        store.find_by_username("alice")           # record
    """

    def __init__(self) -> None:
        self._records: dict[str, AccountRecord] = {}
        self._lock = threading.Lock()

    def find_by_username(self, username: str) -> AccountRecord | None:
        """Look up an account by exact username (case-sensitive)."""
        with self._lock:
            return self._records.get(username)

    def find_by_email(self, email: str) -> AccountRecord | None:
        """Return the first account registered with email, or None.

        Linear scan. Email is not a unique key, so when several accounts share
        an address the one registered first is returned. The argument is
        normalized the same way registration normalizes stored addresses, so
        "alice@EXAMPLE.com" finds "alice@example.com". An address that is not
        valid email syntax matches nothing.
        """
        try:
            wanted = normalize_email(email)
        except EmailNotValidError:
            return None
        with self._lock:
            for record in self._records.values():
                if record.email == wanted:
                    return record
        return None

    def insert_if_absent(self, username: str, record: AccountRecord) -> bool:
        """Store record under username unless the key is taken.

        Returns True if the record was stored, False if an account already
        existed (the existing record is left untouched).
        """
        if record.username != username:
            raise ValueError(f"Record username {record.username!r} does not match key {username!r}")
        with self._lock:
            if username in self._records:
                return False
            self._records[username] = record
            return True

    def count(self) -> int:
        with self._lock:
            return len(self._records)
