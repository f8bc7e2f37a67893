"""Authentication API endpoints."""

from taskpad.services.api.client import APIClient


class AuthAPI:
    """Authentication API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def signup(self, email: str, password: str, name: str) -> dict:
        """Register a new account."""
        response = await self.client.post(
            "/auth/signup",
            json={"email": email, "password": password, "name": name},
            skip_auth=True,
        )
        return response.json()

    async def login(self, email: str, password: str) -> dict:
        """Login with email and password."""
        response = await self.client.post(
            "/auth/login",
            json={"email": email, "password": password},
            skip_auth=True,
        )
        return response.json()

    async def health(self) -> dict:
        """Check that the backend is up."""
        response = await self.client.request("GET", "/health", skip_auth=True)
        return response.json()
