"""
auth/outcomes.py -- Tagged results of the register and login operations.

Outcomes are transport-agnostic. The API layer turns a success outcome into
a response body and raises failure_outcome.to_error() for the rest; the
exception classes carry the status code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from auth.errors import AuthenticationError, ConflictError, ValidationError
from auth.models import AccountView
from auth.validation import ValidationFailure


@dataclass(frozen=True)
class Registered:
    account: AccountView


@dataclass(frozen=True)
class Authenticated:
    username: str


@dataclass(frozen=True)
class Invalid:
    failure: ValidationFailure

    @property
    def reason(self) -> str:
        return self.failure.reason

    @property
    def fields(self) -> tuple[str, ...]:
        """Offending field names, in order, without repeats."""
        return tuple(dict.fromkeys(v.field for v in self.failure.violations))

    def to_error(self) -> ValidationError:
        return ValidationError(self.reason, detail=", ".join(self.fields))


@dataclass(frozen=True)
class Conflict:
    username: str

    def to_error(self) -> ConflictError:
        return ConflictError()


@dataclass(frozen=True)
class Unauthorized:
    def to_error(self) -> AuthenticationError:
        return AuthenticationError()


RegisterOutcome = Union[Registered, Invalid, Conflict]
LoginOutcome = Union[Authenticated, Invalid, Unauthorized]
