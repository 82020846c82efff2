"""
api/routes/auth.py -- Registration, login, logout, and current-user endpoints.

Routes:
  POST /register  -- create account, start session; 201
  POST /login     -- password login, start session; 200
  POST /logout    -- end session, clear cookie; 200 (idempotent)
  GET  /user      -- current user (requires session)

Security:
  POST /login is rate-limited per client IP (LOGIN_RATE_LIMIT); excess
  attempts get 429 rate_limited with Retry-After.
  authenticate_user() runs one key derivation on every failure path so
  response time does not reveal whether an email is registered -- use it,
  never inline get_by_email() + verify_password().
  Unknown email and wrong password share status, code, and message.
  Cache-Control: no-store on login responses.

/register and /login are plain `def` handlers on purpose: FastAPI runs them
in its worker thread pool, which keeps the memory-hard key derivation off the
event loop.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from api.limiter import limiter
from api.models import LoginRequest, MessageResponse, RegisterRequest, UserResponse
from auth.dependencies import get_current_user
from auth.models import User
from auth.passwords import authenticate_user, hash_password
from auth.store import UserStore
from auth.tokens import clear_session_cookie, end_session, set_session_cookie, start_session
from core.config import get_settings

logger = logging.getLogger("rizzmaster.api")

# Auth policy:
# - POST /register: public
# - POST /login:    public, rate-limited
# - POST /logout:   public -- ending a session needs no prior auth
# - GET  /user:     requires session (get_current_user)
router = APIRouter()

_BAD_CREDENTIALS = {"code": "bad_credentials", "message": "Invalid email or password"}


def _user_exists() -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"code": "user_exists", "message": "User already exists"},
    )


@router.post("/register", response_model=UserResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create an account and log it in.

    Missing or empty email/password never reach this function -- request
    validation rejects them with 400 validation_error. A duplicate email is
    rejected before hashing; the IntegrityError branch covers two requests
    racing past that check.
    """
    user_store: UserStore = request.app.state.user_store

    if user_store.get_by_email(body.email) is not None:
        raise _user_exists()

    new_user = User(
        email=body.email,
        password_hash=hash_password(body.password),
        first_name=body.first_name or None,
        last_name=body.last_name or None,
    )
    try:
        user_id = user_store.create_user(new_user)
    except IntegrityError as exc:
        raise _user_exists() from exc

    created = user_store.get_by_id(user_id)
    if created is None:
        raise HTTPException(
            status_code=500,
            detail={"code": "internal_error", "message": "User not found after write."},
        )
    logger.info("Registered user_id=%s", user_id)

    token = start_session(user_store, user_id)
    resp = JSONResponse(
        status_code=201,
        content=UserResponse.from_user(created).model_dump(by_alias=True),
    )
    set_session_cookie(resp, token)
    return resp


# The router must register the limiter's wrapper, so @limiter.limit sits
# directly under @router. The limit is read per request from settings.
@router.post("/login", response_model=UserResponse)
@limiter.limit(lambda: get_settings().login_rate_limit)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; set the session cookie."""
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        resp = JSONResponse(status_code=401, content={"error": _BAD_CREDENTIALS})
        resp.headers["Cache-Control"] = "no-store"
        return resp

    user_store.update_last_login(user.id)
    token = start_session(user_store, user.id)
    logger.info("Login succeeded for user_id=%s", user.id)

    refreshed = user_store.get_by_id(user.id) or user
    resp = JSONResponse(
        status_code=200,
        content=UserResponse.from_user(refreshed).model_dump(by_alias=True),
    )
    set_session_cookie(resp, token)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request) -> JSONResponse:
    """Destroy the current session, if any, and clear the cookie."""
    token = request.cookies.get(get_settings().session_cookie_name)
    end_session(request.app.state.user_store, token)
    if token:
        logger.info("Session ended by logout")
    resp = JSONResponse(content=MessageResponse(message="Logged out successfully").model_dump())
    clear_session_cookie(resp)
    return resp


@router.get("/user", response_model=UserResponse)
def current_user(current: User = Depends(get_current_user)) -> UserResponse:
    """Return the user bound to the request's session."""
    return UserResponse.from_user(current)
