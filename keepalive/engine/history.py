"""Bounded rolling history of executions, newest first."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ..storage.kv import LOGS_KEY, KeyValueStore, get_typed
from .models import LogEntry, LogHistory

logger = logging.getLogger(__name__)

MAX_HISTORY = 14

_RawHistory = TypeAdapter(list[Any])


class HistoryRecorder:
    """Prepends entries to the stored history and truncates it to MAX_HISTORY.

    record() does its read, prepend and write without yielding to the event
    loop, so executions in the same process cannot interleave on ``logs``.
    Writers in other processes remain last-write-wins.
    """

    def __init__(self, store: KeyValueStore, limit: int = MAX_HISTORY) -> None:
        self.store = store
        self.limit = limit

    def load(self) -> list[LogEntry]:
        """Current history.

        An absent or unparsable blob reads as empty. Individual entries that
        fail validation are skipped; the rest of the history is kept.
        """
        raw = get_typed(self.store, LOGS_KEY, _RawHistory, [])
        history: list[LogEntry] = []
        for i, item in enumerate(raw):
            try:
                history.append(LogEntry.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed history entry #%d (%d validation errors)", i, e.error_count(),
                )
        return history

    def record(self, entry: LogEntry) -> list[LogEntry]:
        """Store ``entry`` at the front of the history and return the new history."""
        history = [entry, *self.load()][: self.limit]
        self.store.put(LOGS_KEY, LogHistory.dump_json(history, exclude_none=True).decode())
        logger.debug("Recorded execution %d (history size %d)", entry.id, len(history))
        return history
