"""Exceptions raised by the task list core."""

from typing import Optional


class TaskListError(Exception):
    """Base class for task list errors."""


class ValidationError(TaskListError):
    """Raised when submitted task data is invalid (e.g. blank text)."""


class NotFoundError(TaskListError):
    """Raised when a task id does not match any stored task.

    Attributes:
        task_id: The id that was looked up.
    """

    def __init__(self, task_id: str, message: Optional[str] = None):
        self.task_id = task_id
        super().__init__(message or f"No task with id '{task_id}'")


class PersistenceError(TaskListError):
    """Raised when the task list could not be written to storage."""
