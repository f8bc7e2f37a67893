"""Client-side services for Taskpad - business logic layer."""

from .auth_service import AuthSession
from .config_service import ConfigService, get_config_service
from .local_storage import LocalStorage, get_local_storage
from .task_sync_service import TaskSyncService

__all__ = [
    "AuthSession",
    "ConfigService",
    "LocalStorage",
    "TaskSyncService",
    "get_config_service",
    "get_local_storage",
]
