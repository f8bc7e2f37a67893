"""Tasks API endpoints."""

from typing import Any

from taskpad.services.api.client import APIClient


class TasksAPI:
    """Tasks API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_tasks(self) -> list[dict]:
        """List the caller's tasks."""
        response = await self.client.get("/tasks")
        return response.json()

    async def get_task(self, task_id: int) -> dict:
        """Get a specific task by ID."""
        response = await self.client.get(f"/tasks/{task_id}")
        return response.json()

    async def create_task(self, data: dict[str, Any]) -> dict:
        """Create a new task."""
        response = await self.client.post("/tasks", json=data)
        return response.json()

    async def update_task(self, task_id: int, updates: dict[str, Any]) -> dict:
        """Update a task; only the keys present in ``updates`` are sent."""
        response = await self.client.put(f"/tasks/{task_id}", json=updates)
        return response.json()

    async def delete_task(self, task_id: int) -> None:
        """Delete a task."""
        await self.client.delete(f"/tasks/{task_id}")
