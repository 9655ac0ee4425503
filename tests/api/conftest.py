"""Fixtures for the HTTP layer: an app over an in-memory store."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tendbook.api.app import create_app
from tendbook.api.settings import TendbookAPISettings
from tendbook.store import InMemoryDocumentStore


@pytest.fixture
def api_settings(tmp_path: Path) -> TendbookAPISettings:
    return TendbookAPISettings(_env_file=None, database_url="memory", data_dir=tmp_path)


@pytest.fixture
def api_store() -> Generator[InMemoryDocumentStore, None, None]:
    store = InMemoryDocumentStore()
    yield store
    store.close()


@pytest.fixture
def client(api_settings, api_store) -> Generator[TestClient, None, None]:
    app = create_app(settings=api_settings, store=api_store, configure_logs=False)
    with TestClient(app) as c:
        yield c
