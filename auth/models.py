"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and routes do
the work; these classes only own the shape.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is the login identifier and is unique across all users.
    password_hash holds "<hex key>.<hex salt>" (see auth/passwords.py) and
    never leaves the server -- API responses are built from the other fields.
    """

    email: str
    password_hash: str
    id: int | None = None
    first_name: str | None = None
    last_name: str | None = None
    created_at: str | None = None
    last_login: str | None = None


@dataclass
class Session:
    """A server-side login session.

    token_hash is HMAC-SHA256(SECRET_KEY, raw token). The raw token lives only
    in the client's cookie, so a copy of the sessions table cannot be replayed.
    expires_at is absolute: it is fixed at creation and never extended.
    """

    token_hash: str
    user_id: int
    expires_at: str
    created_at: str | None = None
