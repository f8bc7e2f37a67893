"""User credentials and session tokens.

``CredentialStore`` keeps user records in memory and checks passwords with
bcrypt. ``TokenIssuer`` signs and verifies the stateless HS256 session
tokens handed back on signup and login.
"""

from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from starlette.concurrency import run_in_threadpool

from taskpad.models import MAX_PASSWORD_BYTES, AuthResult, PublicUser, TokenClaims, UserRecord
from taskpad.server.exceptions import (
    DuplicateUserError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
)
from taskpad.utils.logger import get_logger

_ALGORITHM = "HS256"


def _fits_bcrypt(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


class TokenIssuer:
    """Issues and verifies signed session tokens."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=24)):
        self.secret = secret
        self.ttl = ttl

    def issue(self, user: PublicUser, now: datetime | None = None) -> str:
        """Sign a token embedding the user's id and email."""
        issued_at = now or datetime.now(UTC)
        payload = {
            "userId": user.id,
            "email": user.email,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=_ALGORITHM)

    def verify(self, token: str | None) -> TokenClaims:
        """Check the signature and expiry of ``token``.

        Raises:
            MissingTokenError: If no token was supplied
            ExpiredTokenError: If the token's validity window has passed
            InvalidTokenError: If the token is malformed or its signature is bad
        """
        if not token:
            raise MissingTokenError("Access token required")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

        try:
            return TokenClaims(user_id=int(payload["userId"]), email=str(payload["email"]))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token") from e


class CredentialStore:
    """In-memory user registry with bcrypt password hashing."""

    def __init__(self, issuer: TokenIssuer, bcrypt_rounds: int = 10):
        self.issuer = issuer
        self.bcrypt_rounds = bcrypt_rounds
        self._users: dict[int, UserRecord] = {}
        self._ids = itertools.count(1)
        self.logger = get_logger()

    def _find_by_email(self, email: str) -> UserRecord | None:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    def _hash(self, password: str) -> bytes:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self.bcrypt_rounds))

    async def register(self, email: str, password: str, name: str) -> AuthResult:
        """Create a user and return a session token for it.

        Raises:
            DuplicateUserError: If ``email`` is already registered
            ValueError: If ``password`` is longer than bcrypt accepts
        """
        if not _fits_bcrypt(password):
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        if self._find_by_email(email) is not None:
            raise DuplicateUserError("User already exists")

        password_hash = await run_in_threadpool(self._hash, password)

        # Another signup for the same email may have finished while hashing.
        if self._find_by_email(email) is not None:
            raise DuplicateUserError("User already exists")

        user = UserRecord(
            id=next(self._ids),
            email=email,
            password_hash=password_hash,
            name=name,
            created_at=datetime.now(UTC),
        )
        self._users[user.id] = user
        self.logger.info("user registered: id=%s", user.id)

        public = user.public()
        return AuthResult(token=self.issuer.issue(public), user=public)

    async def authenticate(self, email: str, password: str) -> AuthResult:
        """Check credentials and return a fresh session token.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password
                is wrong; the two cases are indistinguishable
        """
        user = self._find_by_email(email)
        # No stored password can match one bcrypt refuses to hash.
        if user is None or not _fits_bcrypt(password):
            raise InvalidCredentialsError("Invalid credentials")

        try:
            valid = await run_in_threadpool(
                bcrypt.checkpw, password.encode("utf-8"), user.password_hash
            )
        except ValueError as e:
            raise InvalidCredentialsError("Invalid credentials") from e
        if not valid:
            raise InvalidCredentialsError("Invalid credentials")

        public = user.public()
        return AuthResult(token=self.issuer.issue(public), user=public)

    def verify(self, token: str | None) -> TokenClaims:
        """Verify a bearer token, see :meth:`TokenIssuer.verify`."""
        return self.issuer.verify(token)

    def get(self, user_id: int) -> PublicUser | None:
        """Public view of a registered user, or None."""
        user = self._users.get(user_id)
        return user.public() if user else None

    def __len__(self) -> int:
        return len(self._users)
