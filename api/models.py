"""
API request and response models for RizzMaster REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
separate from the dataclasses in auth/models.py, which own the internal
domain representation. Route handlers map between the two.

JSON field names are camelCase (firstName, createdAt, ...) because that is
what the browser client sends and reads. Python attributes stay snake_case;
the alias generator bridges the two and populate_by_name lets server code
construct models with snake_case keywords.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from auth.models import User

# ---------------------------------------------------------------------------
# Field types
#
# Whitespace is stripped from identifiers and names only. The password is
# hashed and verified exactly as sent; "secret1" and " secret1 " are
# different passwords.
# ---------------------------------------------------------------------------

_Email = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
_Name = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]
# max_length bounds the work a single request can push into the key derivation.
_Password = Annotated[str, Field(min_length=1, max_length=1024)]


def _reject_blank_password(value: str) -> str:
    if not value.strip():
        raise ValueError("password must not be blank")
    return value


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register.

    Only presence is enforced for email and password; format and strength
    rules belong to the client form.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: _Email
    password: _Password
    first_name: Optional[_Name] = None
    last_name: Optional[_Name] = None

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, value: str) -> str:
        return _reject_blank_password(value)


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    email: _Email
    password: _Password

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, value: str) -> str:
        return _reject_blank_password(value)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of a user. Carries no password hash."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: str = ""
    last_login: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            created_at=user.created_at or "",
            last_login=user.last_login,
        )


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


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
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = {}
