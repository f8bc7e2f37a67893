"""Shared wiring for commands that talk to the API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from taskpad.services.api import AuthAPI, TasksAPI, get_client
from taskpad.services.auth_service import AuthSession
from taskpad.services.local_storage import get_local_storage
from taskpad.services.task_sync_service import TaskSyncService


@dataclass
class ClientServices:
    auth: AuthSession
    tasks: TaskSyncService


@asynccontextmanager
async def client_services() -> AsyncIterator[ClientServices]:
    """Open an API client and the services built on it; closes the client on exit."""
    storage = get_local_storage()
    async with get_client(storage) as client:
        yield ClientServices(
            auth=AuthSession(AuthAPI(client), storage),
            tasks=TaskSyncService(TasksAPI(client), storage),
        )
