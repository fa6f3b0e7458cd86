"""Terminal rendering of task lists and counts."""

from datetime import datetime
from io import StringIO
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tasklist.task import Task
from tasklist.views import TaskCounts

RENDER_WIDTH = 100


def format_timestamp(ts: Optional[int]) -> str:
    """Format epoch milliseconds as local date and time.

    Example: "27 Aug 2025, 07:32 PM". Returns "" when there is no timestamp.
    """
    if not ts:
        return ""
    return datetime.fromtimestamp(ts / 1000).strftime("%d %b %Y, %I:%M %p")


def _new_console(buffer: StringIO) -> Console:
    return Console(file=buffer, force_terminal=True, width=RENDER_WIDTH)


def build_task_table(tasks: list[Task], title: str, empty_message: str) -> Table:
    """Build a rich table for a list of tasks.

    Args:
        tasks: Tasks to show, in display order
        title: Table title
        empty_message: Row text shown when the list is empty

    Returns:
        The rich Table
    """
    table = Table(title=f"{title} ({len(tasks)})", box=box.ROUNDED)
    table.add_column("", justify="center", width=3)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Task", style="cyan")
    table.add_column("Added", style="magenta", no_wrap=True)
    table.add_column("Completed", style="green", no_wrap=True)

    if not tasks:
        table.add_row("", "", f"[dim]{empty_message}[/dim]", "", "")
        return table

    for task in tasks:
        mark = "[green]✓[/green]" if task.completed else "○"
        text = escape(task.text)
        if task.completed:
            text = f"[strike]{text}[/strike]"
        table.add_row(
            mark,
            task.id,
            text,
            format_timestamp(task.created_at),
            format_timestamp(task.completed_at),
        )
    return table


def build_counts_table(task_counts: TaskCounts) -> Table:
    """Build the summary table for task counts."""
    table = Table(title="Summary", box=box.SIMPLE)
    table.add_column("Total", justify="right", style="bold")
    table.add_column("Pending", justify="right", style="yellow")
    table.add_column("Completed", justify="right", style="green")
    table.add_row(
        str(task_counts.total),
        str(task_counts.pending),
        str(task_counts.completed),
    )
    return table


def render_tasks(
    pending_tasks: Optional[list[Task]],
    completed_tasks: Optional[list[Task]],
    task_counts: TaskCounts,
) -> str:
    """Render the pending and completed lists followed by the counts.

    Passing None for one of the lists leaves that section out.

    Returns:
        String representation including ANSI styling
    """
    buffer = StringIO()
    console = _new_console(buffer)

    if pending_tasks is not None:
        console.print(build_task_table(pending_tasks, "Pending", "Nothing pending. Nice!"))
    if completed_tasks is not None:
        console.print(build_task_table(completed_tasks, "Completed", "No completed tasks yet."))
    console.print(build_counts_table(task_counts))

    return buffer.getvalue()


def render_counts(task_counts: TaskCounts) -> str:
    """Render only the counts summary."""
    buffer = StringIO()
    console = _new_console(buffer)
    console.print(build_counts_table(task_counts))
    return buffer.getvalue()
