"""
auth/dependencies.py -- FastAPI Depends() helpers for the auth routes.

The AuthService is built once in the application lifespan and parked on
app.state; routes receive it through get_auth_service() so tests can swap
the whole service (or its store) by replacing app.state.auth_service.

read_request_body() decodes the request into the plain mapping the
validator expects. Both JSON clients and HTML forms are accepted:
  - application/x-www-form-urlencoded and multipart/form-data are read with
    request.form() (needs python-multipart) and flattened to a dict.
  - anything else is decoded as JSON; an empty body becomes None so the
    validator reports it like any other non-object body.

Layer rule: auth/dependencies.py may import from fastapi (for Request)
because this module is part of the FastAPI dependency injection system.
No imports from api/.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request

from auth.errors import ValidationError
from auth.service import AuthService

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def read_request_body(request: Request) -> Any:
    """Return the decoded request body (dict for forms, any JSON value otherwise)."""
    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if content_type in _FORM_CONTENT_TYPES:
        form = await request.form()
        # Repeated keys keep the last value, like a JSON object with duplicates.
        return dict(form.items())

    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ValidationError("Request body is not valid JSON.", detail="body") from exc
