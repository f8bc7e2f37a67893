"""API client for the Taskpad backend."""

from __future__ import annotations

from typing import Any

import httpx

from taskpad.services.config_service import get_config_service
from taskpad.services.local_storage import AUTH_TOKEN_KEY, LocalStorage, get_local_storage


class APIClient:
    """HTTP client for the Taskpad API.

    The bearer token is read from local storage on every request, so a
    login performed through the same storage is picked up immediately.
    """

    def __init__(
        self,
        storage: LocalStorage | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        config = get_config_service().config if base_url is None or timeout is None else None
        self.storage = storage or get_local_storage()
        self.base_url = (base_url or config.api.endpoint).rstrip("/")
        self.timeout = timeout if timeout is not None else config.api.timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> APIClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_headers(self, skip_auth: bool = False) -> dict[str, str]:
        """Get HTTP headers with authentication."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if not skip_auth:
            token = self.storage.get(AUTH_TOKEN_KEY)
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        skip_auth: bool = False,
    ) -> httpx.Response:
        """Make an HTTP request to the API.

        Raises:
            httpx.HTTPStatusError: On a 4xx/5xx response
            httpx.RequestError: If the server could not be reached
        """
        client = self._get_client()
        url = path if path.startswith("/") else f"/{path}"
        response = await client.request(
            method=method,
            url=url,
            json=json,
            params=params,
            headers=self._get_headers(skip_auth=skip_auth),
        )
        response.raise_for_status()
        return response

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any = None, skip_auth: bool = False) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, json=json, skip_auth=skip_auth)

    async def put(self, path: str, *, json: Any = None) -> httpx.Response:
        """Make a PUT request."""
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> httpx.Response:
        """Make a DELETE request."""
        return await self.request("DELETE", path)


def error_message(exc: Exception, default: str) -> str:
    """Best human-readable message for a failed request.

    Prefers the ``error`` field of the backend's JSON error body.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
    return str(exc) or default


def get_client(storage: LocalStorage | None = None) -> APIClient:
    """Get an API client configured from the current settings."""
    return APIClient(storage)
