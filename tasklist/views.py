"""Derived views over a task list snapshot.

All functions here are pure: they never touch the store or storage and
return new lists, preserving the snapshot's order.
"""

from dataclasses import asdict, dataclass
from typing import Iterable

from tasklist.task import Task


@dataclass(frozen=True)
class TaskCounts:
    """Task totals for a snapshot.

    Attributes:
        total: Number of tasks.
        pending: Number of tasks not yet completed.
        completed: Number of completed tasks.
    """

    total: int
    pending: int
    completed: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def pending(snapshot: Iterable[Task]) -> list[Task]:
    """Tasks that are not completed, in snapshot order."""
    return [task for task in snapshot if not task.completed]


def completed(snapshot: Iterable[Task]) -> list[Task]:
    """Tasks that are completed, in snapshot order."""
    return [task for task in snapshot if task.completed]


def counts(snapshot: Iterable[Task]) -> TaskCounts:
    """Count total, pending and completed tasks."""
    tasks = list(snapshot)
    done = sum(1 for task in tasks if task.completed)
    return TaskCounts(total=len(tasks), pending=len(tasks) - done, completed=done)
