"""Tests for the SQLite key-value store and typed decode helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from unittest.mock import patch

import pytest

from keepalive.engine.models import LogHistory, RetryPolicy, RetryPolicyAdapter, TargetList
from keepalive.storage.kv import SQLiteKVStore, StoreError, decode_or_default, get_typed


class TestSQLiteKVStore:
    def test_missing_key_is_none(self, store: SQLiteKVStore) -> None:
        assert store.get("urls") is None

    def test_put_and_get(self, store: SQLiteKVStore) -> None:
        store.put("urls", '["https://a.test"]')
        assert store.get("urls") == '["https://a.test"]'

    def test_put_overwrites(self, store: SQLiteKVStore) -> None:
        store.put("logs", "[]")
        store.put("logs", '[{"id": 1}]')
        assert store.get("logs") == '[{"id": 1}]'

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "kv.db"
        first = SQLiteKVStore(path)
        first.put("settings", '{"maxRetries": 2}')
        first.close()

        second = SQLiteKVStore(path)
        assert second.get("settings") == '{"maxRetries": 2}'
        second.close()

    def test_close_then_reuse(self, store: SQLiteKVStore) -> None:
        store.put("k", "v")
        store.close()
        assert store.get("k") == "v"  # reconnects lazily

    def test_read_failure_raises_store_error(self, store: SQLiteKVStore) -> None:
        with patch.object(store, "_get_conn", side_effect=sqlite3.OperationalError("disk I/O error")):
            with pytest.raises(StoreError, match="disk I/O error"):
                store.get("logs")

    def test_write_failure_raises_store_error(self, store: SQLiteKVStore) -> None:
        with patch.object(store, "_get_conn", side_effect=sqlite3.OperationalError("database is locked")):
            with pytest.raises(StoreError, match="locked"):
                store.put("logs", "[]")


class TestDecodeOrDefault:
    def test_absent(self) -> None:
        assert decode_or_default(TargetList, None, []) == []

    def test_empty_string(self) -> None:
        assert decode_or_default(TargetList, "", []) == []

    def test_invalid_json(self) -> None:
        assert decode_or_default(LogHistory, "{not json", []) == []

    def test_wrong_shape(self) -> None:
        assert decode_or_default(TargetList, '{"url": "x"}', []) == []

    def test_valid(self) -> None:
        assert decode_or_default(TargetList, '["https://a.test", "https://b.test"]', []) == [
            "https://a.test", "https://b.test",
        ]

    def test_settings_default(self) -> None:
        policy = decode_or_default(RetryPolicyAdapter, "[1, 2]", RetryPolicy())
        assert policy == RetryPolicy()


class TestGetTyped:
    def test_reads_from_store(self, store: SQLiteKVStore) -> None:
        store.put("settings", '{"maxRetries": 4, "delaySeconds": 2}')
        policy = get_typed(store, "settings", RetryPolicyAdapter, RetryPolicy())
        assert policy.maxRetries == 4

    def test_store_error_propagates(self, store: SQLiteKVStore) -> None:
        with patch.object(store, "get", side_effect=StoreError("boom")):
            with pytest.raises(StoreError):
                get_typed(store, "urls", TargetList, [])
