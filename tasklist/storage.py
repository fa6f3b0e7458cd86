"""Key-value storage backends and the persisted task list codec.

The task list lives in a single named slot holding a JSON array:

    [
        {"id": "...", "text": "...", "createdAt": 1700000000000,
         "completed": false, "completedAt": null}
    ]

Anything that does not decode to that shape is treated as "no data yet".
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from tasklist.errors import PersistenceError
from tasklist.task import Task, is_timestamp

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todo.tasks.v1"


class KeyValueStorage(Protocol):
    """Minimal string key-value port used by the task store."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """In-process storage, mostly useful for tests and throwaway sessions."""

    def __init__(self, items: Optional[dict[str, str]] = None):
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStorage:
    """Named string slots kept in one JSON object on disk.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash never leaves a half-written file behind.

    Attributes:
        path: Location of the backing JSON file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise PersistenceError(f"Could not read {self.path}: {e}") from e
        except ValueError:
            logger.warning("Storage file %s is not valid JSON; ignoring it", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s does not hold an object; ignoring it", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e


def encode_tasks(tasks: list[Task], indent: Optional[int] = None) -> str:
    """Serialize tasks to the persisted JSON form, preserving order."""
    return json.dumps([task.to_dict() for task in tasks], indent=indent, ensure_ascii=False)


def _decode_entry(raw: Any) -> Task:
    if not isinstance(raw, dict):
        raise ValueError("task entry is not an object")
    task_id = raw.get("id")
    text = raw.get("text")
    created_at = raw.get("createdAt")
    completed = raw.get("completed")
    completed_at = raw.get("completedAt")

    if not isinstance(task_id, str) or not task_id:
        raise ValueError("task id must be a non-empty string")
    if not isinstance(text, str) or not text.strip():
        raise ValueError(f"task {task_id} has empty text")
    if not is_timestamp(created_at):
        raise ValueError(f"task {task_id} has invalid createdAt")
    if not isinstance(completed, bool):
        raise ValueError(f"task {task_id} has invalid completed flag")
    if completed_at is not None and not is_timestamp(completed_at):
        raise ValueError(f"task {task_id} has invalid completedAt")
    if completed != (completed_at is not None):
        raise ValueError(f"task {task_id} completedAt does not match completed")

    return Task(
        id=task_id,
        text=text,
        created_at=int(created_at),
        completed=completed,
        completed_at=int(completed_at) if completed_at is not None else None,
    )


def decode_tasks(raw: Optional[str]) -> list[Task]:
    """Parse the persisted JSON form.

    Args:
        raw: Slot content, or None when the slot is empty.

    Returns:
        The decoded tasks in stored order.

    Raises:
        ValueError: If the content is not valid JSON of the expected shape.
    """
    if raw is None:
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("persisted task list is not an array")

    tasks = [_decode_entry(entry) for entry in data]
    seen: set[str] = set()
    for task in tasks:
        if task.id in seen:
            raise ValueError(f"duplicate task id {task.id}")
        seen.add(task.id)
    return tasks
