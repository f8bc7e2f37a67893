"""User data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

MAX_PASSWORD_BYTES = 72


class UserRecord(BaseModel):
    """Server-side user record. Never serialized to clients."""

    id: int
    email: str
    password_hash: bytes
    name: str
    created_at: datetime

    def public(self) -> PublicUser:
        """Project the record onto its public view."""
        return PublicUser(id=self.id, email=self.email, name=self.name)


class PublicUser(BaseModel):
    """User view safe to return over the API and keep on the client."""

    id: int
    email: str
    name: str


class SignupRequest(BaseModel):
    """Body of ``POST /api/auth/signup``."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        """bcrypt only reads the first 72 bytes of a password."""
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """Body of ``POST /api/auth/login``."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthPayload(BaseModel):
    """Successful signup/login response body."""

    message: str
    token: str
    user: PublicUser


@dataclass(frozen=True)
class AuthResult:
    """Token plus public user view returned by the credential store."""

    token: str
    user: PublicUser


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified session token."""

    user_id: int
    email: str


class AuthResponse(BaseModel):
    """Outcome of a client-side login or signup attempt."""

    success: bool
    message: str
    user: PublicUser | None = None
