"""
auth/passwords.py -- Password hashing, verification, and login lookup.

Stored format: "<hex(derived key)>.<hex(salt)>"
  derived key: 64 bytes of Argon2id output (memory-hard).
  salt:        16 bytes from secrets.token_bytes, fresh for every hash.

Argon2id is used through argon2-cffi's low-level API rather than
PasswordHasher because the stored value is our own key.salt composite, not
a PHC string. The cost parameters are fixed module constants: changing them
invalidates every stored hash.

Verification re-derives the key with the stored salt and compares with
hmac.compare_digest, so the comparison time does not depend on where the
two keys first differ. Malformed stored values and length mismatches are
plain non-matches.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import hmac
import logging
import secrets
from typing import TYPE_CHECKING

from argon2.low_level import Type, hash_secret_raw

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("rizzmaster.auth")

KEY_BYTES = 64
SALT_BYTES = 16
DELIMITER = "."

_TIME_COST = 3
_MEMORY_COST_KIB = 64 * 1024
_PARALLELISM = 4


def _derive_key(password: str, salt: bytes) -> bytes:
    """Deterministic for a given (password, salt) pair."""
    return hash_secret_raw(
        secret=password.encode("utf-8"),
        salt=salt,
        time_cost=_TIME_COST,
        memory_cost=_MEMORY_COST_KIB,
        parallelism=_PARALLELISM,
        hash_len=KEY_BYTES,
        type=Type.ID,
    )


def hash_password(password: str) -> str:
    """Return the storable key.salt composite for a plaintext password.

    No length or complexity policy is applied here; the API layer owns input
    validation. An empty password is a programming error.
    """
    if not password:
        raise ValueError("password must not be empty")
    salt = secrets.token_bytes(SALT_BYTES)
    return f"{_derive_key(password, salt).hex()}{DELIMITER}{salt.hex()}"


def verify_password(password: str, stored: str) -> bool:
    """Return True if password re-derives to the key held in stored."""
    try:
        key_hex, salt_hex = stored.split(DELIMITER, 1)
        expected = bytes.fromhex(key_hex)
        salt = bytes.fromhex(salt_hex)
    except (AttributeError, ValueError):
        return False
    if not expected or len(salt) < SALT_BYTES:
        return False
    return hmac.compare_digest(_derive_key(password, salt), expected)


# Computed once at import so the unknown-email path of authenticate_user()
# pays for exactly one derivation, like the wrong-password path.
_DUMMY_HASH: str = hash_password("rizzmaster_timing_dummy")


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Resolve a login attempt to a User, or None.

    Unknown email and wrong password are indistinguishable to the caller, in
    both return value and cost: the unknown-email path still verifies against
    _DUMMY_HASH before returning.
    """
    user = store.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        logger.info("Login failed for unknown email %s", email)
        return None
    if not verify_password(password, user.password_hash):
        logger.info("Login failed for user_id=%s (bad password)", user.id)
        return None
    return user
