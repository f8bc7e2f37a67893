"""Unit tests for the tasks command group.

``client_services`` is replaced with a stub so no HTTP is attempted.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from typer.testing import CliRunner

from taskpad.commands.tasks import app, encode_image, parse_due_date
from taskpad.commands.decorators import AppError
from taskpad.models import Task, TaskCounts, TaskStatus
from taskpad.services.local_storage import AUTH_TOKEN_KEY, get_local_storage

runner = CliRunner()


def _task(task_id: int = 1, **overrides) -> Task:
    data = {
        "id": task_id,
        "userId": 1,
        "title": "Buy milk",
        "description": "2% organic",
        "dueDate": "2025-01-01T00:00:00Z",
        "status": "pending",
        "createdAt": "2024-12-01T00:00:00Z",
        "updatedAt": "2024-12-01T00:00:00Z",
    }
    data.update(overrides)
    return Task.model_validate(data)


@pytest.fixture(autouse=True)
def logged_in(isolated_dirs):
    get_local_storage().set(AUTH_TOKEN_KEY, "tok")


@pytest.fixture
def services():
    svc = MagicMock()
    svc.tasks.refresh = AsyncMock(return_value=[_task(1), _task(2, title="Walk dog", status="completed")])
    svc.tasks.get_task = AsyncMock(return_value=_task(1))
    svc.tasks.create_task = AsyncMock(return_value=_task(3))
    svc.tasks.update_task = AsyncMock(return_value=_task(1, status="completed"))
    svc.tasks.delete_task = AsyncMock(return_value=None)
    svc.tasks.upcoming = MagicMock(return_value=[_task(1)])
    svc.tasks.overdue = MagicMock(return_value=[])
    svc.tasks.counts = MagicMock(return_value=TaskCounts(total=2, pending=1, completed=1))

    @asynccontextmanager
    async def fake_client_services():
        yield svc

    with patch("taskpad.commands.tasks.client_services", fake_client_services):
        yield svc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_parse_due_date_accepts_date_and_datetime(self):
        assert parse_due_date("2025-01-01") == datetime(2025, 1, 1)
        assert parse_due_date("2025-01-01T10:00:00+00:00") == datetime(2025, 1, 1, 10, tzinfo=UTC)

    def test_parse_due_date_rejects_garbage(self):
        with pytest.raises(AppError):
            parse_due_date("tomorrow")

    def test_encode_image(self, tmp_path):
        path = tmp_path / "pic.png"
        path.write_bytes(b"\x89PNG")
        assert encode_image(path) == "data:image/png;base64,iVBORw=="

    def test_encode_missing_image(self, tmp_path):
        with pytest.raises(AppError):
            encode_image(tmp_path / "missing.png")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def test_requires_login(services):
    get_local_storage().remove(AUTH_TOKEN_KEY)
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 3
    assert "Not logged in" in result.output


class TestList:
    def test_table(self, services):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0, result.output
        assert "Buy milk" in result.output
        assert "Walk dog" in result.output

    def test_json_filtered_by_status(self, services):
        result = runner.invoke(app, ["list", "--status", "completed", "-o", "json"])
        assert result.exit_code == 0, result.output
        assert [t["id"] for t in json.loads(result.output)] == [2]

    def test_search(self, services):
        result = runner.invoke(app, ["list", "--search", "dog", "-o", "json"])
        assert [t["title"] for t in json.loads(result.output)] == ["Walk dog"]

    def test_output_format_from_config(self, services):
        from taskpad.services.config_service import get_config_service

        get_config_service().set("output.format", "json")
        result = runner.invoke(app, ["list"])
        assert len(json.loads(result.output)) == 2


class TestAdd:
    def test_add(self, services):
        result = runner.invoke(
            app, ["add", "Buy milk", "-d", "2% organic", "--due", "2025-01-01T00:00:00+00:00"]
        )
        assert result.exit_code == 0, result.output
        assert "Created task 3" in result.output

        data = services.tasks.create_task.call_args.args[0]
        assert data.title == "Buy milk"
        assert data.status is TaskStatus.PENDING
        assert data.image is None

    def test_add_with_image(self, services, tmp_path):
        image = tmp_path / "pic.png"
        image.write_bytes(b"\x89PNG")
        result = runner.invoke(
            app, ["add", "x", "-d", "y", "--due", "2025-01-01", "--image", str(image)]
        )
        assert result.exit_code == 0, result.output
        assert services.tasks.create_task.call_args.args[0].image.startswith("data:image/png;base64,")

    def test_add_bad_due_date(self, services):
        result = runner.invoke(app, ["add", "x", "-d", "y", "--due", "someday"])
        assert result.exit_code == 2
        services.tasks.create_task.assert_not_called()

    @pytest.mark.parametrize("title,description", [("", "y"), ("x", ""), ("x", "  ")])
    def test_add_blank_text(self, services, title, description):
        result = runner.invoke(app, ["add", title, "-d", description, "--due", "2025-01-01"])
        assert result.exit_code == 2
        services.tasks.create_task.assert_not_called()


class TestShow:
    def test_show(self, services):
        result = runner.invoke(app, ["show", "1"])
        assert result.exit_code == 0, result.output
        assert "2% organic" in result.output

    def test_missing(self, services):
        services.tasks.get_task.return_value = None
        result = runner.invoke(app, ["show", "9"])
        assert result.exit_code == 5


class TestUpdate:
    def test_update_status(self, services):
        result = runner.invoke(app, ["update", "1", "--status", "completed"])
        assert result.exit_code == 0, result.output

        task_id, changes = services.tasks.update_task.call_args.args
        assert task_id == 1
        assert changes.to_api() == {"status": "completed"}

    def test_clear_image(self, services):
        runner.invoke(app, ["update", "1", "--clear-image"])
        _, changes = services.tasks.update_task.call_args.args
        assert changes.to_api() == {"image": None}

    def test_nothing_to_update(self, services):
        result = runner.invoke(app, ["update", "1"])
        assert result.exit_code == 0
        assert "Nothing to update" in result.output
        services.tasks.update_task.assert_not_called()

    def test_image_and_clear_image_conflict(self, services, tmp_path):
        image = tmp_path / "pic.png"
        image.write_bytes(b"x")
        result = runner.invoke(app, ["update", "1", "--image", str(image), "--clear-image"])
        assert result.exit_code == 2

    def test_server_404(self, services):
        request = httpx.Request("PUT", "http://x/api/tasks/9")
        response = httpx.Response(404, json={"error": "Task not found"}, request=request)
        services.tasks.update_task.side_effect = httpx.HTTPStatusError(
            "404", request=request, response=response
        )

        result = runner.invoke(app, ["update", "9", "--title", "x"])

        assert result.exit_code == 5
        assert "Task not found" in result.output


class TestDelete:
    def test_delete_with_yes(self, services):
        result = runner.invoke(app, ["delete", "1", "--yes"])
        assert result.exit_code == 0, result.output
        services.tasks.delete_task.assert_awaited_once_with(1)

    def test_delete_declined(self, services):
        result = runner.invoke(app, ["delete", "1"], input="n\n")
        assert result.exit_code == 0
        services.tasks.delete_task.assert_not_called()

    def test_delete_unreachable_server(self, services):
        services.tasks.delete_task.side_effect = httpx.ConnectError("connection refused")
        result = runner.invoke(app, ["delete", "1", "-y"])
        assert result.exit_code == 4


class TestViews:
    def test_upcoming(self, services):
        result = runner.invoke(app, ["upcoming", "-o", "json"])
        assert [t["id"] for t in json.loads(result.output)] == [1]

    def test_overdue_empty(self, services):
        result = runner.invoke(app, ["overdue"])
        assert "No tasks found" in result.output

    def test_stats_json(self, services):
        result = runner.invoke(app, ["stats", "-o", "json"])
        assert json.loads(result.output) == {
            "total": 2,
            "pending": 1,
            "inProgress": 0,
            "completed": 1,
        }
