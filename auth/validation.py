"""
auth/validation.py -- Field rules for registration and login requests.

Each request type has one explicit validation function that takes the raw
decoded body and returns either the typed request or a ValidationFailure.
Nothing here raises for bad input and nothing has side effects.

The password rule is a set of independent checks (length, lowercase,
uppercase, special character, bcrypt byte limit) rather than one opaque
pattern, so each rule can be tested and reported on its own.

Every violation found is collected, in field order, so a client sees all
problems with its request in one round trip.
"""

from __future__ import annotations

import string
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email

from auth.models import LoginRequest, RegistrationRequest, Role

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 24
PASSWORD_MIN_LENGTH = 5
PASSWORD_MAX_LENGTH = 24
PASSWORD_SPECIAL_CHARACTERS = frozenset("-+_!@#$%^&*.,?")

# bcrypt only looks at the first 72 bytes of its input (and bcrypt >= 5
# refuses longer input outright). Reachable only with non-ASCII passwords.
PASSWORD_MAX_BYTES = 72

_LOWERCASE = frozenset(string.ascii_lowercase)
_UPPERCASE = frozenset(string.ascii_uppercase)

REGISTRATION_FIELDS = ("username", "email", "role", "password")
LOGIN_FIELDS = ("username", "password")


@dataclass(frozen=True)
class Violation:
    field: str
    message: str


@dataclass(frozen=True)
class ValidationFailure:
    violations: tuple[Violation, ...]

    @property
    def reason(self) -> str:
        return "; ".join(v.message for v in self.violations)


# ---------------------------------------------------------------------------
# Per-field rules. Each returns a list of messages (empty = valid).
# ---------------------------------------------------------------------------


def check_username(value: str) -> list[str]:
    if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
        return [
            f'"username" length must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters'
        ]
    return []


def normalize_email(value: str) -> str:
    """Return the canonical form of an address (lowercased domain, Unicode NFC).

    Raises EmailNotValidError if the address is not syntactically valid.
    Only syntax is checked: no DNS lookup, and the top-level domain is not
    matched against the IANA list.
    """
    return validate_email(value, check_deliverability=False).normalized


def check_email(value: str) -> list[str]:
    try:
        normalize_email(value)
    except EmailNotValidError:
        return ['"email" must be a valid email']
    return []


def check_role(value: str) -> list[str]:
    if value not in {r.value for r in Role}:
        allowed = ", ".join(f"[{r.value}]" for r in Role)
        return [f'"role" must be one of {allowed}']
    return []


def check_password(value: str) -> list[str]:
    """Apply every password rule and return the messages for the ones broken."""
    problems: list[str] = []
    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        problems.append(
            f'"password" length must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters'
        )
    if not _LOWERCASE.intersection(value):
        problems.append('"password" must contain at least one lowercase letter')
    if not _UPPERCASE.intersection(value):
        problems.append('"password" must contain at least one uppercase letter')
    if not PASSWORD_SPECIAL_CHARACTERS.intersection(value):
        specials = " ".join(sorted(PASSWORD_SPECIAL_CHARACTERS))
        problems.append(f'"password" must contain at least one of {specials}')
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        problems.append(f'"password" must not exceed {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded')
    return problems


_RULES: dict[str, Callable[[str], list[str]]] = {
    "username": check_username,
    "email": check_email,
    "role": check_role,
    "password": check_password,
}


# ---------------------------------------------------------------------------
# Request validators
# ---------------------------------------------------------------------------


def _collect(raw: Any, fields: tuple[str, ...]) -> ValidationFailure | dict[str, str]:
    if not isinstance(raw, Mapping):
        return ValidationFailure((Violation("body", "request body must be a JSON object"),))

    violations: list[Violation] = []
    values: dict[str, str] = {}
    for name in fields:
        if name not in raw or raw[name] is None:
            violations.append(Violation(name, f'"{name}" is required'))
            continue
        value = raw[name]
        if not isinstance(value, str):
            violations.append(Violation(name, f'"{name}" must be a string'))
            continue
        if value == "":
            violations.append(Violation(name, f'"{name}" is not allowed to be empty'))
            continue
        for message in _RULES[name](value):
            violations.append(Violation(name, message))
        values[name] = value

    for extra in raw:
        if extra not in fields:
            violations.append(Violation(str(extra), f'"{extra}" is not allowed'))

    if violations:
        return ValidationFailure(tuple(violations))
    return values


def validate_registration(raw: Any) -> RegistrationRequest | ValidationFailure:
    """Validate a raw registration body.

    The email address is stored in the normalized form email-validator
    returns (lowercased domain, Unicode NFC).
    """
    result = _collect(raw, REGISTRATION_FIELDS)
    if isinstance(result, ValidationFailure):
        return result
    return RegistrationRequest(
        username=result["username"],
        email=normalize_email(result["email"]),
        role=Role(result["role"]),
        password=result["password"],
    )


def validate_login(raw: Any) -> LoginRequest | ValidationFailure:
    result = _collect(raw, LOGIN_FIELDS)
    if isinstance(result, ValidationFailure):
        return result
    return LoginRequest(username=result["username"], password=result["password"])
