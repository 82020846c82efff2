"""
auth/tokens.py -- Opaque session tokens and the session cookie.

Security design decisions:
  Tokens: secrets.token_urlsafe(32) gives 256 bits of entropy. The token is
       opaque -- it carries no claims. Identity lives in the sessions table.

  Storage: the store keys sessions by HMAC-SHA256(SECRET_KEY, raw token).
       The digest is deterministic, so lookup is a primary-key hit, and a
       leaked sessions table cannot be replayed without SECRET_KEY.

  Cookie: httpOnly (no JS access), samesite=lax, secure only when
       SECURE_COOKIES=true. max_age equals the session TTL so cookie and
       server row expire together. The cookie is never re-issued on later
       requests, so expiry is absolute.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from auth.models import Session
from core.config import get_settings

if TYPE_CHECKING:
    from auth.store import UserStore

_settings = get_settings()


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


def hash_session_token(raw_token: str) -> str:
    """Return HMAC-SHA256(SECRET_KEY, raw_token) as a hex string."""
    return hmac.new(
        _settings.secret_key.encode(),
        raw_token.encode(),
        hashlib.sha256,
    ).hexdigest()


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


def start_session(store: UserStore, user_id: int) -> str:
    """Persist a new session for user_id and return the raw token for the cookie."""
    token = generate_session_token()
    expires = datetime.now(timezone.utc) + timedelta(seconds=_settings.session_ttl_seconds)
    store.create_session(
        Session(
            token_hash=hash_session_token(token),
            user_id=user_id,
            expires_at=expires.isoformat(timespec="microseconds"),
        )
    )
    return token


def resolve_session(store: UserStore, raw_token: str | None) -> Session | None:
    """Return the live session behind a cookie value, or None."""
    if not raw_token:
        return None
    return store.get_session(hash_session_token(raw_token))


def end_session(store: UserStore, raw_token: str | None) -> None:
    """Destroy the session behind a cookie value. Unknown tokens are ignored."""
    if raw_token:
        store.delete_session(hash_session_token(raw_token))


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def set_session_cookie(response, token: str) -> None:
    """Write the raw session token as an httpOnly cookie on the response."""
    response.set_cookie(
        _settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=_settings.secure_cookies,
        max_age=_settings.session_ttl_seconds,
    )


def clear_session_cookie(response) -> None:
    response.delete_cookie(
        _settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=_settings.secure_cookies,
    )
