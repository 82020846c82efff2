"""
auth/store.py -- SQLAlchemy Core persistence layer for users and sessions.

Pattern: Repository + Data Mapper.
UserStore is the repository; _row_to_user / _row_to_session are the mappers.
Route and dependency code never touches SQL directly.

The store is constructed once by the application lifespan (or by a test
fixture) and handed to request handlers through app.state.user_store. There
is no module-level engine.

Security:
  All queries use bound parameters. No f-strings in SQL.
  Sessions are keyed by the HMAC digest of the token (see auth/tokens.py);
  the raw token is never passed to this module.

Timestamps are ISO 8601 UTC strings with a fixed microsecond precision, so
lexical order equals chronological order and purge_expired_sessions() can
compare them in SQL.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event, text
from sqlalchemy.engine import Engine

from auth.models import Session, User

logger = logging.getLogger("rizzmaster.auth")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("created_at", String(32), nullable=False),
    Column("last_login", String(32)),
)

_sessions = Table(
    "sessions",
    _metadata,
    Column("token_hash", String(64), primary_key=True),  # HMAC-SHA256 hex
    Column("user_id", Integer, nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("expires_at", String(32), nullable=False, index=True),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers are not blocked during writes.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _now_iso() -> str:
    return _iso(datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User and Session entities.

    Usage:
        store = UserStore("sqlite:///rizzmaster.db")
        uid = store.create_user(User(email="a@x.com", password_hash=hash_password("secret1")))
        user = store.get_by_email("a@x.com")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("User store ping failed")
            return False
        return True

    # ------------------------------------------------------------------
    # User queries
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> int:
        """Insert a new user and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the email already exists.
        The route layer turns that into a 400 user_exists response, which
        also covers two concurrent registrations racing past the
        pre-insert existence check.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _users.insert().values(
                    email=user.email,
                    password_hash=user.password_hash,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: int) -> User | None:
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def update_last_login(self, user_id: int) -> None:
        """Stamp the current UTC timestamp as last_login for the given user."""
        with self.engine.connect() as conn:
            conn.execute(_users.update().where(_users.c.id == user_id).values(last_login=_now_iso()))
            conn.commit()

    # ------------------------------------------------------------------
    # Session queries
    # ------------------------------------------------------------------

    def create_session(self, session: Session) -> None:
        with self.engine.connect() as conn:
            conn.execute(
                _sessions.insert().values(
                    token_hash=session.token_hash,
                    user_id=session.user_id,
                    created_at=_now_iso(),
                    expires_at=session.expires_at,
                )
            )
            conn.commit()

    def get_session(self, token_hash: str) -> Session | None:
        """Return the live session for token_hash, or None.

        An expired row is deleted on sight and reported as absent. The row is
        never touched otherwise -- lookups do not extend expiry.
        """
        with self.engine.connect() as conn:
            row = conn.execute(_sessions.select().where(_sessions.c.token_hash == token_hash)).fetchone()
        if row is None:
            return None
        session = _row_to_session(row)
        if session.expires_at <= _now_iso():
            self.delete_session(token_hash)
            return None
        return session

    def delete_session(self, token_hash: str) -> bool:
        """Delete a session. Returns False if it did not exist (not an error)."""
        with self.engine.connect() as conn:
            result = conn.execute(_sessions.delete().where(_sessions.c.token_hash == token_hash))
            conn.commit()
        return result.rowcount > 0

    def purge_expired_sessions(self) -> int:
        """Delete every session past its expiry. Returns number of rows removed."""
        with self.engine.connect() as conn:
            result = conn.execute(_sessions.delete().where(_sessions.c.expires_at <= _now_iso()))
            conn.commit()
        return result.rowcount

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        created_at=row.created_at,
        last_login=row.last_login,
    )


def _row_to_session(row) -> Session:
    return Session(
        token_hash=row.token_hash,
        user_id=row.user_id,
        created_at=row.created_at,
        expires_at=row.expires_at,
    )
