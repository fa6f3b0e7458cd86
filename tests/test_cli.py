"""Tests for the command-line interface."""

import json

import click
import pytest
from click.testing import CliRunner

from tasklist.cli import cli, resolve_task_id
from tasklist.errors import NotFoundError
from tasklist.storage import DEFAULT_STORAGE_KEY, JsonFileStorage, MemoryStorage, decode_tasks
from tasklist.store import TaskStore


@pytest.fixture()
def runner():
    return CliRunner()


@pytest.fixture()
def task_file(tmp_path):
    return tmp_path / "tasks.json"


def invoke(runner, tmp_path, task_file, *args, input=None):
    config = tmp_path / "config.json"
    return runner.invoke(
        cli, ["-c", str(config), "-f", str(task_file), *args], obj={}, input=input
    )


def stored_tasks(task_file):
    return decode_tasks(JsonFileStorage(task_file).get_item(DEFAULT_STORAGE_KEY))


class TestCli:
    """Tests for CLI commands."""

    def test_add(self, runner, tmp_path, task_file):
        result = invoke(runner, tmp_path, task_file, "add", "Buy", "milk")
        assert result.exit_code == 0, result.output
        assert "Added:" in result.output
        assert [t.text for t in stored_tasks(task_file)] == ["Buy milk"]

    def test_add_blank_fails(self, runner, tmp_path, task_file):
        result = invoke(runner, tmp_path, task_file, "add", "   ")
        assert result.exit_code == 1
        assert "cannot be empty" in result.output
        assert stored_tasks(task_file) == []

    def test_done_and_undo_by_prefix(self, runner, tmp_path, task_file):
        invoke(runner, tmp_path, task_file, "add", "Buy milk")
        task_id = stored_tasks(task_file)[0].id

        result = invoke(runner, tmp_path, task_file, "done", task_id[:6])
        assert result.exit_code == 0, result.output
        task = stored_tasks(task_file)[0]
        assert task.completed and task.completed_at is not None

        result = invoke(runner, tmp_path, task_file, "undo", task_id)
        assert result.exit_code == 0, result.output
        task = stored_tasks(task_file)[0]
        assert not task.completed and task.completed_at is None

    def test_done_unknown_id(self, runner, tmp_path, task_file):
        result = invoke(runner, tmp_path, task_file, "done", "zzzz")
        assert result.exit_code == 1
        assert "No task with id" in result.output

    def test_edit(self, runner, tmp_path, task_file):
        invoke(runner, tmp_path, task_file, "add", "Buy milk")
        task_id = stored_tasks(task_file)[0].id
        result = invoke(runner, tmp_path, task_file, "edit", task_id, "Buy", "bread")
        assert result.exit_code == 0, result.output
        assert stored_tasks(task_file)[0].text == "Buy bread"

    def test_rm_with_confirmation(self, runner, tmp_path, task_file):
        invoke(runner, tmp_path, task_file, "add", "Buy milk")
        task_id = stored_tasks(task_file)[0].id

        result = invoke(runner, tmp_path, task_file, "rm", task_id, input="n\n")
        assert result.exit_code == 1
        assert len(stored_tasks(task_file)) == 1

        result = invoke(runner, tmp_path, task_file, "rm", task_id, input="y\n")
        assert result.exit_code == 0, result.output
        assert stored_tasks(task_file) == []

    def test_clear(self, runner, tmp_path, task_file):
        invoke(runner, tmp_path, task_file, "add", "One")
        invoke(runner, tmp_path, task_file, "add", "Two")
        result = invoke(runner, tmp_path, task_file, "clear", "--yes")
        assert result.exit_code == 0, result.output
        assert stored_tasks(task_file) == []

    def test_clear_when_empty(self, runner, tmp_path, task_file):
        result = invoke(runner, tmp_path, task_file, "clear")
        assert result.exit_code == 0
        assert "No tasks to clear" in result.output

    def test_list(self, runner, tmp_path, task_file):
        invoke(runner, tmp_path, task_file, "add", "Buy milk")
        invoke(runner, tmp_path, task_file, "add", "Walk dog")
        task_id = stored_tasks(task_file)[1].id
        invoke(runner, tmp_path, task_file, "done", task_id)

        result = invoke(runner, tmp_path, task_file, "list")
        assert result.exit_code == 0, result.output
        assert "Pending (1)" in result.output
        assert "Completed (1)" in result.output
        assert "Walk dog" in result.output

        result = invoke(runner, tmp_path, task_file, "list", "--pending")
        assert "Completed (1)" not in result.output

    def test_list_conflicting_flags(self, runner, tmp_path, task_file):
        result = invoke(runner, tmp_path, task_file, "list", "--pending", "--completed")
        assert result.exit_code == 2

    def test_stats(self, runner, tmp_path, task_file):
        invoke(runner, tmp_path, task_file, "add", "Buy milk")
        result = invoke(runner, tmp_path, task_file, "stats")
        assert result.exit_code == 0, result.output
        assert "Summary" in result.output

    def test_export(self, runner, tmp_path, task_file):
        invoke(runner, tmp_path, task_file, "add", "Buy milk")
        out_dir = tmp_path / "exports"
        result = invoke(runner, tmp_path, task_file, "export", "-o", str(out_dir))
        assert result.exit_code == 0, result.output
        files = list(out_dir.glob("tasks-*.json"))
        assert len(files) == 1
        assert json.loads(files[0].read_text())[0]["text"] == "Buy milk"

    def test_corrupt_file_starts_empty(self, runner, tmp_path, task_file):
        task_file.write_text(json.dumps({DEFAULT_STORAGE_KEY: "garbage"}))
        result = invoke(runner, tmp_path, task_file, "stats")
        assert result.exit_code == 0, result.output

    def test_config_from_environment(self, runner, tmp_path, task_file):
        config = tmp_path / "env_config.json"
        config.write_text(json.dumps({"storage_key": "from-env"}))
        result = runner.invoke(
            cli,
            ["-f", str(task_file), "add", "Buy milk"],
            obj={},
            env={"TASKLIST_CONFIG": str(config)},
        )
        assert result.exit_code == 0, result.output
        assert JsonFileStorage(task_file).get_item("from-env") is not None

    def test_init_config(self, runner, tmp_path, task_file):
        result = invoke(runner, tmp_path, task_file, "init-config")
        assert result.exit_code == 0, result.output
        config = json.loads((tmp_path / "config.json").read_text())
        assert config["storage_key"] == DEFAULT_STORAGE_KEY

        result = invoke(runner, tmp_path, task_file, "init-config")
        assert "already exists" in result.output

    def test_config_storage_key(self, runner, tmp_path, task_file):
        (tmp_path / "config.json").write_text(json.dumps({"storage_key": "custom"}))
        invoke(runner, tmp_path, task_file, "add", "Buy milk")
        storage = JsonFileStorage(task_file)
        assert storage.get_item("custom") is not None
        assert storage.get_item(DEFAULT_STORAGE_KEY) is None

    def test_invalid_config(self, runner, tmp_path, task_file):
        (tmp_path / "config.json").write_text("{not json")
        result = invoke(runner, tmp_path, task_file, "stats")
        assert result.exit_code == 1
        assert "could not read configuration" in result.output


class TestResolveTaskId:
    """Tests for id prefix resolution."""

    def make_store(self, *ids):
        it = iter(ids)
        store = TaskStore(MemoryStorage(), id_factory=lambda: next(it))
        for task_id in ids:
            store.add(f"Task {task_id}")
        return store

    def test_exact_match_wins(self):
        store = self.make_store("abc", "abcd")
        assert resolve_task_id(store, "abc") == "abc"

    def test_unique_prefix(self):
        store = self.make_store("abc123", "xyz789")
        assert resolve_task_id(store, "xy") == "xyz789"

    def test_unknown(self):
        store = self.make_store("abc123")
        with pytest.raises(NotFoundError):
            resolve_task_id(store, "q")

    def test_ambiguous(self):
        store = self.make_store("abc123", "abc456")
        with pytest.raises(click.BadParameter):
            resolve_task_id(store, "abc")
