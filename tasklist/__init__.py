"""A small task list manager with persistent storage."""

from tasklist.errors import NotFoundError, PersistenceError, TaskListError, ValidationError
from tasklist.storage import JsonFileStorage, MemoryStorage
from tasklist.store import TaskStore
from tasklist.task import Task
from tasklist.views import TaskCounts, completed, counts, pending

__all__ = [
    "Task",
    "TaskStore",
    "TaskCounts",
    "pending",
    "completed",
    "counts",
    "MemoryStorage",
    "JsonFileStorage",
    "TaskListError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
]
