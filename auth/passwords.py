"""
auth/passwords.py -- Salted, deliberately slow password hashing.

Security design decisions:
  bcrypt, used directly (no passlib wrapper). Bcrypt is the right choice for
  low-entropy secrets because its cost factor makes brute force expensive.
  The cost is configurable (BCRYPT_ROUNDS, default 10) and every digest
  records the cost it was made with, so raising the setting never breaks
  verification of existing digests.

  The bcrypt digest embeds its salt. The salt is still returned separately
  by generate_salt() so the account record can keep it alongside the
  digest, but verify() only ever needs the digest.

  checkpw compares digests in constant time.

  _dummy_digest enables timing equalization in the login flow: a login for
  an unknown username still pays for one bcrypt verify, so response time
  does not reveal whether the username exists.

Hashing is CPU-bound and may take tens of milliseconds. Callers must never
hold a store lock while calling hash() or verify().
"""

from __future__ import annotations

import logging

import bcrypt

logger = logging.getLogger("credkeeper.auth")

_DEFAULT_ROUNDS = 10


class PasswordHasher:
    """bcrypt-backed hasher.

    Usage:
        hasher = PasswordHasher(rounds=12)
        salt = hasher.generate_salt()
        digest = hasher.hash("Secret!1", salt)
        hasher.verify("Secret!1", digest)   # True
    """

    def __init__(self, rounds: int = _DEFAULT_ROUNDS) -> None:
        self.rounds = rounds
        # Computed once so the first unknown-username login is not measurably
        # slower than the ones that follow.
        self._dummy_digest = self.hash("credkeeper-timing-dummy", self.generate_salt())

    def generate_salt(self) -> bytes:
        """Return a fresh random salt encoding this hasher's cost factor."""
        return bcrypt.gensalt(rounds=self.rounds)

    def hash(self, plaintext: str, salt: bytes) -> bytes:
        """Return the bcrypt digest of plaintext under salt.

        Deterministic for a fixed (plaintext, salt) pair. The result is a
        60-byte modular-crypt string with the salt and cost embedded.
        """
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt)

    def verify(self, plaintext: str, digest: bytes) -> bool:
        """Return True if plaintext reproduces digest.

        A digest that is not a valid bcrypt string yields False; any other
        failure propagates.
        """
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest)
        except ValueError:
            logger.warning("Stored password digest is malformed; treating as mismatch")
            return False

    def burn_verify(self, plaintext: str) -> None:
        """Run one verify against the dummy digest and discard the result."""
        self.verify(plaintext, self._dummy_digest)
