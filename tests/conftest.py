"""
Shared pytest fixtures for tendbook tests.

This module provides:
- Document stores for both backends (in-memory and SQLite on a temp file)
- Operation contexts over those stores
- A controllable clock for the tending log

Usage:
    Fixtures are auto-discovered by pytest::

        def test_something(ctx, clock):
            clock.set(1_000)
            ...
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from tendbook.ops.context import OperationContext
from tendbook.store import InMemoryDocumentStore, SqliteDocumentStore


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def memory_store() -> Generator[InMemoryDocumentStore, None, None]:
    store = InMemoryDocumentStore()
    yield store
    store.close()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "tendbook.db"


@pytest.fixture
def sqlite_store(db_path: Path) -> Generator[SqliteDocumentStore, None, None]:
    store = SqliteDocumentStore.open(str(db_path))
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    """Each backend in turn; tests using this run twice."""
    if request.param == "memory":
        s = InMemoryDocumentStore()
    else:
        s = SqliteDocumentStore.open(str(tmp_path / "tendbook.db"))
    yield s
    s.close()


# =============================================================================
# Operation contexts
# =============================================================================


@pytest.fixture
def ctx(store) -> OperationContext:
    """OperationContext over the parametrized store."""
    return OperationContext(store=store, caller="test")


@pytest.fixture
def dry_ctx(store) -> OperationContext:
    """OperationContext with dry_run=True over the same store as ``ctx``."""
    return OperationContext(store=store, caller="test", dry_run=True)


# =============================================================================
# Time
# =============================================================================


class Clock:
    """Stand-in for ``now_ms`` returning a settable millisecond timestamp."""

    def __init__(self, start: int = 1_718_036_400_000) -> None:
        self.now = start

    def set(self, value: int) -> None:
        self.now = value

    def advance(self, ms: int = 1) -> int:
        self.now += ms
        return self.now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock() -> Generator[Clock, None, None]:
    """Freeze the time ``record_tending`` stamps entries with."""
    fake = Clock()
    with patch("tendbook.ops.history.now_ms", fake):
        yield fake
