"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from keepalive.engine.pipeline import KeepAliveEngine
from keepalive.storage.kv import SETTINGS_KEY, URLS_KEY, SQLiteKVStore
from tests.helpers import FakeSleep


@pytest.fixture
def store(tmp_path: Path) -> Iterator[SQLiteKVStore]:
    s = SQLiteKVStore(db_path=tmp_path / "test_keepalive.db")
    yield s
    s.close()


@pytest.fixture
def seed(store: SQLiteKVStore) -> Callable[..., None]:
    """Write urls / settings the way the external CRUD collaborator would."""

    def _seed(urls: list[str] | None = None, settings: dict[str, Any] | None = None) -> None:
        if urls is not None:
            store.put(URLS_KEY, json.dumps(urls))
        if settings is not None:
            store.put(SETTINGS_KEY, json.dumps(settings))

    return _seed


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def make_engine(store: SQLiteKVStore, fake_sleep: FakeSleep) -> Callable[..., KeepAliveEngine]:
    def _make(transport: httpx.AsyncBaseTransport, **kwargs: Any) -> KeepAliveEngine:
        kwargs.setdefault("sleep", fake_sleep)
        return KeepAliveEngine(store, transport=transport, **kwargs)

    return _make
