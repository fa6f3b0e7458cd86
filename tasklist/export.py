"""JSON export of a task list snapshot."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Union

from tasklist.storage import encode_tasks
from tasklist.task import Task

EXPORT_INDENT = 2


def export_json(snapshot: Iterable[Task]) -> str:
    """Render the snapshot as indented JSON in the persisted format."""
    return encode_tasks(list(snapshot), indent=EXPORT_INDENT)


def export_filename(now: Optional[datetime] = None) -> str:
    """Build the export file name from a UTC date/time.

    Example: ``tasks-2025-08-27-19-32-05.json``.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"tasks-{now.strftime('%Y-%m-%d-%H-%M-%S')}.json"


def write_export(
    snapshot: Iterable[Task],
    directory: Union[str, Path] = ".",
    now: Optional[datetime] = None,
) -> Path:
    """Write the export artifact into a directory.

    Args:
        snapshot: Tasks to export.
        directory: Target directory (created if missing).
        now: Timestamp used for the file name (defaults to now).

    Returns:
        Path of the written file.
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / export_filename(now)
    with open(path, "w", encoding="utf-8") as f:
        f.write(export_json(snapshot))
        f.write("\n")
    return path
