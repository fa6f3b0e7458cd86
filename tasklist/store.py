"""Task store: the single owner of the task list and its persistence."""

import logging
from dataclasses import replace
from typing import Callable, Iterator, List, Optional

from tasklist.errors import NotFoundError, ValidationError
from tasklist.storage import DEFAULT_STORAGE_KEY, KeyValueStorage, decode_tasks, encode_tasks
from tasklist.task import Task, generate_id, is_timestamp, now_ms

logger = logging.getLogger(__name__)

Listener = Callable[[List[Task]], None]

# Attempts at drawing an unused id before giving up.
MAX_ID_ATTEMPTS = 16


class TaskStore:
    """Holds the ordered task list and persists it after every mutation.

    Tasks are kept newest first. Writes are authoritative: a mutation is only
    committed in memory once the storage write succeeded, so a
    ``PersistenceError`` leaves the store exactly as it was.

    Attributes:
        storage: Key-value port the list is persisted to.
        key: Name of the slot holding the serialized list.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Optional[Callable[[], int]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """Initialize an empty store; call ``load()`` to read persisted tasks.

        Args:
            storage: Key-value port used for persistence.
            key: Slot name for the task list.
            clock: Returns the current time in epoch milliseconds.
            id_factory: Returns candidate task ids.
        """
        self.storage = storage
        self.key = key
        self._clock = clock or now_ms
        self._id_factory = id_factory or generate_id
        self._tasks: List[Task] = []
        self._issued_ids: set[str] = set()
        self._listeners: List[Listener] = []

    # -------------------- persistence --------------------

    def load(self) -> None:
        """Replace the in-memory list with the persisted one.

        Missing, unreadable or malformed data results in an empty list.
        """
        try:
            raw = self.storage.get_item(self.key)
            tasks = decode_tasks(raw)
        except Exception as e:
            logger.warning("Discarding unreadable task data in slot %r: %s", self.key, e)
            tasks = []
        self._tasks = tasks
        self._issued_ids.update(task.id for task in tasks)
        logger.debug("Loaded %d tasks from slot %r", len(tasks), self.key)

    def _commit(self, tasks: List[Task]) -> None:
        self.storage.set_item(self.key, encode_tasks(tasks))
        self._tasks = tasks
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # -------------------- queries --------------------

    def snapshot(self) -> List[Task]:
        """Return a copy of the task list, newest first."""
        return self._tasks.copy()

    def get(self, task_id: str) -> Task:
        """Get a task by id.

        Raises:
            NotFoundError: If no task has that id.
        """
        return self._tasks[self._index_of(task_id)]

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFoundError(task_id)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return any(task.id == task_id for task in self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.snapshot())

    # -------------------- mutations --------------------

    def _new_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self._id_factory()
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate
        raise RuntimeError("Could not generate a unique task id")

    @staticmethod
    def _clean_text(text: str) -> str:
        if not isinstance(text, str):
            raise ValidationError(f"Task text must be a string, not {type(text).__name__}")
        cleaned = text.strip()
        if not cleaned:
            raise ValidationError("Task text cannot be empty")
        return cleaned

    def add(self, text: str) -> Task:
        """Add a new pending task at the top of the list.

        Args:
            text: The task description; surrounding whitespace is trimmed.

        Returns:
            The created task.

        Raises:
            ValidationError: If the text is empty or whitespace only.
            PersistenceError: If the list could not be saved.
        """
        cleaned = self._clean_text(text)
        task = Task(id=self._new_id(), text=cleaned, created_at=self._clock())
        self._commit([task] + self._tasks)
        logger.debug("Added task %s", task.id)
        return task

    def update(
        self,
        task_id: str,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
        completed_at: Optional[int] = None,
    ) -> Task:
        """Apply a partial change to a task.

        The completion timestamp is maintained here: it is set when a task
        becomes completed (to ``completed_at`` if given, else now) and cleared
        when it becomes pending again.

        Args:
            task_id: Id of the task to change.
            text: New text, trimmed before storing.
            completed: New completion state.
            completed_at: Explicit completion time in epoch milliseconds.

        Returns:
            The updated task.

        Raises:
            NotFoundError: If no task has that id.
            ValidationError: If the new text is blank, the completion time is
                not a finite number, or it is given for a task that is not
                completed.
            PersistenceError: If the list could not be saved.
        """
        if completed_at is not None:
            if not is_timestamp(completed_at):
                raise ValidationError(f"Invalid completion time: {completed_at!r}")
            completed_at = int(completed_at)

        index = self._index_of(task_id)
        current = self._tasks[index]
        updated = current

        if text is not None:
            updated = replace(updated, text=self._clean_text(text))

        if completed is not None and completed != updated.completed:
            if completed:
                at = completed_at if completed_at is not None else self._clock()
                updated = updated.complete(at)
            else:
                updated = updated.uncomplete()
        elif completed_at is not None and updated.completed:
            updated = replace(updated, completed_at=completed_at)

        if completed_at is not None and not updated.completed:
            raise ValidationError("completed_at can only be set on a completed task")

        if updated == current:
            return current

        tasks = self._tasks.copy()
        tasks[index] = updated
        self._commit(tasks)
        logger.debug("Updated task %s (completed=%s)", task_id, updated.completed)
        return updated

    def remove(self, task_id: str) -> None:
        """Delete a task; unknown ids are ignored.

        Raises:
            PersistenceError: If the list could not be saved.
        """
        tasks = [task for task in self._tasks if task.id != task_id]
        if len(tasks) == len(self._tasks):
            return
        self._commit(tasks)
        logger.debug("Removed task %s", task_id)

    def clear(self) -> None:
        """Delete every task.

        Raises:
            PersistenceError: If the list could not be saved.
        """
        self._commit([])
        logger.debug("Cleared all tasks")

    # -------------------- notifications --------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked with a fresh snapshot after each change.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __str__(self) -> str:
        """Return a string representation of the task list."""
        lines = [f"=== Tasks ({len(self._tasks)}) ==="]
        if not self._tasks:
            lines.append("No tasks yet.")
        else:
            for i, task in enumerate(self._tasks, 1):
                lines.append(f"{i}. {task}")
        return "\n".join(lines)
