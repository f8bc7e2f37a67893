"""Configuration models for Taskpad.

The same ``AppConfig`` document holds the client settings (where the API
lives, how to print results) and the settings ``taskpad serve`` starts the
backend with.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, field_validator

DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


class APIConfig(BaseModel):
    """API configuration."""

    endpoint: str = Field(default="http://localhost:3000/api")
    timeout: int = Field(default=30)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Reject empty endpoints and drop trailing slashes."""
        if not v or not v.strip():
            raise ValueError("endpoint cannot be empty")
        return v.strip().rstrip("/")


class ServerConfig(BaseModel):
    """Backend configuration."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000)
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET)
    token_ttl_hours: int = Field(default=24, ge=1)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    def with_env_overrides(self) -> ServerConfig:
        """Return a copy with ``PORT``, ``JWT_SECRET`` and TTL env overrides applied."""
        updates: dict = {}
        if os.environ.get("PORT"):
            updates["port"] = int(os.environ["PORT"])
        if os.environ.get("JWT_SECRET"):
            updates["jwt_secret"] = os.environ["JWT_SECRET"]
        if os.environ.get("TASKPAD_TOKEN_TTL_HOURS"):
            updates["token_ttl_hours"] = int(os.environ["TASKPAD_TOKEN_TTL_HOURS"])
        return self.model_copy(update=updates)


class OutputConfig(BaseModel):
    """Output configuration."""

    format: str = Field(default="table")  # table, json, yaml
    color: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main Taskpad configuration."""

    api: APIConfig = Field(default_factory=APIConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
