"""Task model for the task list."""

import math
import random
import string
import time
from dataclasses import dataclass, replace
from typing import Any, Optional

ID_ALPHABET = string.digits + string.ascii_lowercase


def now_ms() -> int:
    """Return the current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def is_timestamp(value: Any) -> bool:
    """Return True for a finite number usable as epoch milliseconds."""
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(ID_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id(timestamp: Optional[int] = None) -> str:
    """Generate an opaque task id.

    Eight random base-36 characters followed by the last four base-36 digits
    of the millisecond timestamp.

    Args:
        timestamp: Time component to use (defaults to now).

    Returns:
        A 12-character id string.
    """
    if timestamp is None:
        timestamp = now_ms()
    salt = "".join(random.choices(ID_ALPHABET, k=8))
    return salt + _to_base36(timestamp)[-4:].rjust(4, "0")


@dataclass(frozen=True)
class Task:
    """A single to-do entry.

    Tasks are immutable values; the store replaces a task with an updated
    copy instead of mutating it.

    Attributes:
        id: Opaque unique identifier, assigned at creation.
        text: Non-empty task description.
        created_at: Creation time in milliseconds since the epoch.
        completed: Whether the task is completed.
        completed_at: Completion time in milliseconds (only when completed).
    """

    id: str
    text: str
    created_at: int
    completed: bool = False
    completed_at: Optional[int] = None

    def complete(self, at: int) -> "Task":
        """Return a completed copy of this task.

        An already completed task keeps its original completion time.
        """
        if self.completed:
            return self
        return replace(self, completed=True, completed_at=at)

    def uncomplete(self) -> "Task":
        """Return a pending copy of this task."""
        return replace(self, completed=False, completed_at=None)

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted (camelCase) form of the task."""
        return {
            "id": self.id,
            "text": self.text,
            "createdAt": self.created_at,
            "completed": self.completed,
            "completedAt": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Build a task from its persisted form.

        Raises:
            KeyError: If a required field is missing.
        """
        return cls(
            id=data["id"],
            text=data["text"],
            created_at=data["createdAt"],
            completed=data["completed"],
            completed_at=data.get("completedAt"),
        )

    def __str__(self) -> str:
        """Return a string representation of the task."""
        status = "✓" if self.completed else " "
        return f"[{status}] {self.text}"
