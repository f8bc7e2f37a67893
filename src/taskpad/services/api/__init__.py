"""HTTP wrappers around the Taskpad REST API."""

from .auth import AuthAPI
from .client import APIClient, error_message, get_client
from .tasks import TasksAPI

__all__ = ["APIClient", "AuthAPI", "TasksAPI", "error_message", "get_client"]
