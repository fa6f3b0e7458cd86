"""Shared fixtures for tasklist tests."""

import itertools
import logging

import pytest

from tasklist.storage import MemoryStorage
from tasklist.store import TaskStore

from fakes import FakeClock


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handler changes made by setup_logging during CLI tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def store(storage, clock):
    counter = itertools.count(1)
    s = TaskStore(storage, clock=clock, id_factory=lambda: f"task{next(counter)}")
    s.load()
    return s
