"""
API response models for credkeeper REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Request bodies are not modelled here: the raw JSON object is handed to
AuthService, whose validator owns the field rules and error messages.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from auth.models import AccountView, Role


class AccountResponse(BaseModel):
    """Response body for a successful POST /api/v1/auth/register.

    password is always the empty string. It is kept in the shape for clients
    that bind the response to the same form object they submitted.
    """

    model_config = ConfigDict(frozen=True)

    username: str
    email: str
    role: Role
    password: str = ""

    @classmethod
    def from_view(cls, account: AccountView) -> "AccountResponse":
        return cls(username=account.username, email=account.email, role=account.role)


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    accounts: int
