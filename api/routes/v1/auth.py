"""
api/routes/v1/auth.py -- Registration and login REST endpoints.

Routes:
  POST /api/v1/auth/register   -- create an account; 200 with {username, email, role}
  POST /api/v1/auth/login      -- verify credentials; 200 with empty body

Error mapping (rendered by the AuthError handler in api/main.py):
  400 validation_error  -- body missing fields or breaking a field rule
  409 conflict          -- username already registered
  401 bad_credentials   -- unknown username or wrong password, one message for both

The body is decoded by read_request_body(): JSON objects and HTML form posts
(urlencoded or multipart) are both accepted.

Both handlers are plain def functions. FastAPI runs them in its thread pool,
so bcrypt work never blocks the event loop or other requests.

Cache-Control: no-store on success responses here and on AuthError responses
(set by the handler); credentials and account data must not be cached.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Response

from api.models import AccountResponse
from auth.dependencies import get_auth_service, read_request_body
from auth.outcomes import Authenticated, Registered
from auth.service import AuthService

router = APIRouter()


@router.post("/auth/register", response_model=AccountResponse)
def register(
    response: Response,
    body: Any = Depends(read_request_body),
    service: AuthService = Depends(get_auth_service),
) -> AccountResponse:
    """Register a new account.

    The response never carries the password, salt or digest; the password
    field is always empty.
    """
    response.headers["Cache-Control"] = "no-store"
    outcome = service.register(body)
    if isinstance(outcome, Registered):
        return AccountResponse.from_view(outcome.account)
    raise outcome.to_error()


@router.post("/auth/login")
def login(
    body: Any = Depends(read_request_body),
    service: AuthService = Depends(get_auth_service),
) -> Response:
    """Verify a username and password.

    Unknown username and wrong password share one 401 response so the
    endpoint cannot be used to enumerate accounts.
    """
    outcome = service.login(body)
    if isinstance(outcome, Authenticated):
        return Response(status_code=200, headers={"Cache-Control": "no-store"})
    raise outcome.to_error()
