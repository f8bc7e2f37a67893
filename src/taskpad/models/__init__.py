"""Domain models for Taskpad."""

from .config_models import APIConfig, AppConfig, OutputConfig, ServerConfig
from .task import Task, TaskCounts, TaskCreate, TaskStatus, TaskUpdate
from .user import (
    MAX_PASSWORD_BYTES,
    AuthPayload,
    AuthResponse,
    AuthResult,
    LoginRequest,
    PublicUser,
    SignupRequest,
    TokenClaims,
    UserRecord,
)

__all__ = [
    "APIConfig",
    "AppConfig",
    "OutputConfig",
    "ServerConfig",
    "Task",
    "TaskCounts",
    "TaskCreate",
    "TaskStatus",
    "TaskUpdate",
    "MAX_PASSWORD_BYTES",
    "AuthPayload",
    "AuthResponse",
    "AuthResult",
    "LoginRequest",
    "PublicUser",
    "SignupRequest",
    "TokenClaims",
    "UserRecord",
]
