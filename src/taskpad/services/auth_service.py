"""Client-side authentication session.

Holds the signed-in state and user, mirrors them to local storage, and
publishes every change through observables. There is no token refresh: an
expired token surfaces as a rejected request.
"""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from taskpad.models import AuthResponse, PublicUser
from taskpad.services.api.auth import AuthAPI
from taskpad.services.api.client import error_message
from taskpad.services.local_storage import AUTH_TOKEN_KEY, CURRENT_USER_KEY, LocalStorage
from taskpad.utils.logger import get_logger
from taskpad.utils.observable import Observable

INVALID_RESPONSE = "Invalid response from server"


class AuthSession:
    """Current authentication state of the client."""

    def __init__(self, api: AuthAPI, storage: LocalStorage):
        self.api = api
        self.storage = storage
        self.is_authenticated: Observable[bool] = Observable(False)
        self.current_user: Observable[PublicUser | None] = Observable(None)
        self._restore()

    def _restore(self) -> None:
        token = self.storage.get(AUTH_TOKEN_KEY)
        user_data = self.storage.get(CURRENT_USER_KEY)
        if not token or not user_data:
            return
        try:
            user = PublicUser.model_validate(user_data)
        except ValidationError:
            get_logger().warning("ignoring malformed stored user")
            return
        self.current_user.next(user)
        self.is_authenticated.next(True)

    def get_current_user(self) -> PublicUser | None:
        return self.current_user.value

    def get_token(self) -> str | None:
        """The stored bearer token, if any."""
        return self.storage.get(AUTH_TOKEN_KEY)

    async def signup(self, email: str, password: str, name: str) -> AuthResponse:
        """Create an account and sign in with it."""
        try:
            response = await self.api.signup(email, password, name)
        except httpx.HTTPError as e:
            get_logger().warning("signup failed: %s", e)
            return AuthResponse(
                success=False, message=error_message(e, "Failed to create account")
            )
        except ValueError as e:
            get_logger().warning("signup failed: unreadable response: %s", e)
            return AuthResponse(success=False, message=INVALID_RESPONSE)
        return self._accept(
            response,
            fallback_user={"id": 0, "email": email, "name": name},
            default_message="Account created successfully",
        )

    async def login(self, email: str, password: str) -> AuthResponse:
        """Sign in with existing credentials."""
        try:
            response = await self.api.login(email, password)
        except httpx.HTTPError as e:
            get_logger().warning("login failed: %s", e)
            return AuthResponse(success=False, message=error_message(e, "Login failed"))
        except ValueError as e:
            get_logger().warning("login failed: unreadable response: %s", e)
            return AuthResponse(success=False, message=INVALID_RESPONSE)
        return self._accept(
            response,
            fallback_user={"id": 0, "email": email, "name": email.split("@")[0]},
            default_message="Login successful",
        )

    def _accept(
        self, response: object, *, fallback_user: dict, default_message: str
    ) -> AuthResponse:
        if not isinstance(response, dict):
            get_logger().warning("unexpected auth response: %r", type(response).__name__)
            return AuthResponse(success=False, message=INVALID_RESPONSE)

        token = response.get("token")
        if not token or not isinstance(token, str):
            return AuthResponse(
                success=False, message=f"{INVALID_RESPONSE}: no token received"
            )

        try:
            user = PublicUser.model_validate(response.get("user") or fallback_user)
        except ValidationError as e:
            get_logger().warning("malformed user in auth response: %s", e)
            return AuthResponse(success=False, message=INVALID_RESPONSE)

        self.storage.set(AUTH_TOKEN_KEY, token)
        self.storage.set(CURRENT_USER_KEY, user.model_dump())

        self.current_user.next(user)
        self.is_authenticated.next(True)
        get_logger().info("signed in: user=%s", user.id)
        return AuthResponse(
            success=True,
            message=str(response.get("message") or default_message),
            user=user,
        )

    async def logout(self) -> None:
        """Forget the token and user and publish the signed-out state."""
        self.storage.remove(AUTH_TOKEN_KEY)
        self.storage.remove(CURRENT_USER_KEY)
        self.current_user.next(None)
        self.is_authenticated.next(False)
