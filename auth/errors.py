"""
auth/errors.py -- Expected failure kinds for register and login.

Each class carries the machine-readable code and the HTTP status the API
layer answers with, so the route handlers never map error kinds by hand.
The service does not raise these for normal control flow; it returns
outcomes (auth/outcomes.py) whose to_error() builds the matching exception.

Anything that is not an AuthError (bcrypt failure, exhausted randomness
source) is an internal fault and is left to the API catch-all handler.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for expected, client-facing credential failures."""

    code: str = "auth_error"
    status_code: int = 400
    default_message: str = "Request could not be processed."

    def __init__(self, message: str | None = None, *, detail: str | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AuthError):
    """Malformed or missing input field. Always recoverable by the caller.

    detail names the offending fields, comma-separated (e.g. "email, role"),
    so a form can highlight them without parsing the message.
    """

    code = "validation_error"
    status_code = 400
    default_message = "Request validation failed."


class ConflictError(AuthError):
    """The username is already registered."""

    code = "conflict"
    status_code = 409
    default_message = "A user with that username already exists."


class AuthenticationError(AuthError):
    """Unknown username or wrong password.

    The message is fixed and identical for both causes so a caller cannot
    tell which one happened.
    """

    code = "bad_credentials"
    status_code = 401
    default_message = "Invalid username or password."

    def __init__(self) -> None:
        super().__init__(self.default_message)
