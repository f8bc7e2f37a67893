"""Local key-value persistence for the client.

Everything lives in a single JSON document under the platform data dir.
Writes replace the whole document, so concurrent writers resolve as last
write wins.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_data_dir

from taskpad.utils.logger import get_logger

AUTH_TOKEN_KEY = "authToken"
CURRENT_USER_KEY = "currentUser"
TASKS_KEY = "tasks"


class LocalStorage:
    """JSON-file backed get/set/remove store."""

    def __init__(self, path: Path | None = None):
        self.path = path or Path(user_data_dir("taskpad")) / "storage.json"

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            get_logger().warning("local storage unreadable, starting empty: %s", e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.chmod(0o600)
        tmp.replace(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``."""
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable ``value`` under ``key``."""
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        """Delete ``key`` if present."""
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def clear(self) -> None:
        """Delete every stored value."""
        if self.path.exists():
            self.path.unlink()


@lru_cache(maxsize=1)
def get_local_storage() -> LocalStorage:
    """Get the process-wide LocalStorage."""
    return LocalStorage()
