"""
auth/dependencies.py -- FastAPI Depends() helpers for session authentication.

The only credential is the session cookie set by /login and /register. It is
resolved cookie -> session row -> user on every protected request.

try_get_current_user() is the soft variant (returns None on failure).
get_current_user() wraps it and raises HTTP 401 if unauthenticated.

Layer rule: no imports from api/. This module may import from fastapi
because it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.models import User
from auth.store import UserStore
from auth.tokens import resolve_session
from core.config import get_settings


def try_get_current_user(request: Request) -> User | None:
    """Resolve the request's session cookie to a User.

    Returns None when the cookie is missing, unknown, expired, or points at a
    user that no longer exists. Never raises -- callers that need a hard 401
    should use get_current_user().

    On success the user is also attached to request.state.user for
    downstream handlers and middleware.
    """
    user_store: UserStore = request.app.state.user_store
    session = resolve_session(user_store, request.cookies.get(get_settings().session_cookie_name))
    if session is None:
        return None
    user = user_store.get_by_id(session.user_id)
    if user is None:
        return None
    request.state.user = user
    return user


def get_current_user(request: Request) -> User:
    """Require a valid session. Raises HTTP 401 otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...
    """
    user = try_get_current_user(request)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Unauthorized"},
        )
    return user
