"""Command-line interface for the task list."""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click
from rich.console import Console
from rich.markup import escape

from tasklist.config import DEFAULT_CONFIG, load_config, save_default_config
from tasklist.errors import NotFoundError, TaskListError
from tasklist.export import write_export
from tasklist.logging_setup import setup_logging
from tasklist.storage import JsonFileStorage
from tasklist.store import TaskStore
from tasklist.views import completed, counts, pending
from tasklist.visualization import render_counts, render_tasks

DEFAULT_CONFIG_FILE = "tasklist_config.json"

console = Console()
logger = logging.getLogger(__name__)


@contextmanager
def report_errors() -> Iterator[None]:
    """Turn task list errors into a red message and exit status 1."""
    try:
        yield
    except TaskListError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


def get_store(ctx: click.Context) -> TaskStore:
    """Return the store for this invocation, loading it on first use."""
    obj = ctx.find_root().obj
    if "store" not in obj:
        config = obj["config"]
        storage = JsonFileStorage(obj["file"] or config["storage_file"])
        store = TaskStore(storage, key=config["storage_key"])
        store.load()
        obj["store"] = store
    return obj["store"]


def resolve_task_id(store: TaskStore, prefix: str) -> str:
    """Resolve a full id or a unique id prefix to a task id.

    Raises:
        NotFoundError: If no task id starts with the prefix.
        click.BadParameter: If several task ids start with the prefix.
    """
    if prefix in store:
        return prefix
    matches = [task.id for task in store.snapshot() if task.id.startswith(prefix)]
    if not matches:
        raise NotFoundError(prefix)
    if len(matches) > 1:
        raise click.BadParameter(
            f"'{prefix}' matches {len(matches)} tasks: {', '.join(matches)}",
            param_hint="ID",
        )
    return matches[0]


@click.group()
@click.option(
    "-c", "--config",
    envvar="TASKLIST_CONFIG",
    default=DEFAULT_CONFIG_FILE,
    help="Path to configuration file",
    show_default=True,
)
@click.option(
    "-f", "--file",
    envvar="TASKLIST_FILE",
    default=None,
    help=f"Task storage file (default from config: {DEFAULT_CONFIG['storage_file']})",
)
@click.option(
    "-v", "--verbose",
    count=True,
    help="Increase log output (-v info, -vv debug)",
)
@click.pass_context
def cli(ctx, config, file, verbose):
    """A small task list: add, complete, edit and delete to-do items."""
    ctx.ensure_object(dict)
    try:
        settings = load_config(config)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] could not read configuration '{config}': {escape(str(e))}")
        sys.exit(1)

    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = settings["log_level"]
    setup_logging(level)

    ctx.obj['config_path'] = config
    ctx.obj['config'] = settings
    ctx.obj['file'] = file


@cli.command()
@click.argument("text", nargs=-1, required=True)
@click.pass_context
def add(ctx, text):
    """Add a new task."""
    store = get_store(ctx)
    with report_errors():
        task = store.add(" ".join(text))
    console.print(f"[green]Added:[/green] {escape(task.text)} [dim]({task.id})[/dim]")


@cli.command(name="list")
@click.option("--pending", "only_pending", is_flag=True, help="Show only pending tasks")
@click.option("--completed", "only_completed", is_flag=True, help="Show only completed tasks")
@click.pass_context
def list_cmd(ctx, only_pending, only_completed):
    """Show pending and completed tasks."""
    if only_pending and only_completed:
        raise click.UsageError("--pending and --completed are mutually exclusive")

    snapshot = get_store(ctx).snapshot()
    pending_tasks = None if only_completed else pending(snapshot)
    completed_tasks = None if only_pending else completed(snapshot)
    click.echo(render_tasks(pending_tasks, completed_tasks, counts(snapshot)), nl=False)


def _set_completed(ctx: click.Context, task_id: str, done: bool) -> None:
    store = get_store(ctx)
    with report_errors():
        task = store.update(resolve_task_id(store, task_id), completed=done)
    label = "[green]Completed:[/green]" if done else "[yellow]Reopened:[/yellow]"
    console.print(f"{label} {escape(task.text)}")


@cli.command()
@click.argument("task_id", metavar="ID")
@click.pass_context
def done(ctx, task_id):
    """Mark a task as completed."""
    _set_completed(ctx, task_id, True)


@cli.command()
@click.argument("task_id", metavar="ID")
@click.pass_context
def undo(ctx, task_id):
    """Mark a completed task as pending again."""
    _set_completed(ctx, task_id, False)


@cli.command()
@click.argument("task_id", metavar="ID")
@click.argument("text", nargs=-1, required=True)
@click.pass_context
def edit(ctx, task_id, text):
    """Change the text of a task."""
    store = get_store(ctx)
    with report_errors():
        task = store.update(resolve_task_id(store, task_id), text=" ".join(text))
    console.print(f"[green]Updated:[/green] {escape(task.text)}")


@cli.command()
@click.argument("task_id", metavar="ID")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def rm(ctx, task_id, yes):
    """Delete a task."""
    store = get_store(ctx)
    with report_errors():
        task = store.get(resolve_task_id(store, task_id))
        if not yes:
            click.confirm(f"Delete task '{task.text}'?", abort=True)
        store.remove(task.id)
    console.print(f"[red]Deleted:[/red] {escape(task.text)}")


@cli.command()
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear(ctx, yes):
    """Delete all tasks."""
    store = get_store(ctx)
    if not len(store):
        console.print("[dim]No tasks to clear.[/dim]")
        return
    if not yes:
        click.confirm(f"Clear all {len(store)} tasks?", abort=True)
    with report_errors():
        store.clear()
    console.print("[green]All tasks cleared.[/green]")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show task counts."""
    click.echo(render_counts(counts(get_store(ctx).snapshot())), nl=False)


@cli.command()
@click.option(
    "-o", "--output-dir",
    default=None,
    help="Directory for the export file (default from config)",
)
@click.pass_context
def export(ctx, output_dir):
    """Export all tasks to a timestamped JSON file."""
    directory = output_dir or ctx.obj['config']["export_dir"]
    snapshot = get_store(ctx).snapshot()
    try:
        path = write_export(snapshot, directory)
    except OSError as e:
        console.print(f"[red]Error during export:[/red] {escape(str(e))}")
        sys.exit(1)
    logger.info("Exported %d tasks to %s", len(snapshot), path)
    console.print(f"[green]Exported {len(snapshot)} tasks to:[/green] {path}")


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite existing configuration file",
)
@click.pass_context
def init_config(ctx, force):
    """Initialize a sample configuration file."""
    config_path = Path(ctx.obj['config_path'])

    if config_path.exists() and not force:
        console.print(f"[yellow]Configuration file '{config_path}' already exists.[/yellow]")
        console.print("[dim]Use --force to overwrite.[/dim]")
        return

    save_default_config(str(config_path))
    console.print(f"[green]Created sample configuration file:[/green] {config_path}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    try:
        cli(obj={}, args=argv)
        return 0
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
