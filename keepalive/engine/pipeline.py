"""Execution pipeline — load inputs, probe all targets, record the entry.

Both triggers go through KeepAliveEngine.execute():
  manual  — POST /api/execute, ``keepalive run``
  cron    — CronScheduler
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

from ..storage.kv import SETTINGS_KEY, URLS_KEY, KeyValueStore, get_typed
from .history import HistoryRecorder
from .models import LogEntry, RetryPolicy, RetryPolicyAdapter, TargetList, TriggerKind
from .orchestrator import DEFAULT_TIMEZONE, execute_all
from .retry import RetryRunner

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Keep-Alive-Engine/2.0"


class KeepAliveEngine:
    """Ties the store, the retry runner and the history recorder together."""

    def __init__(
        self,
        store: KeyValueStore,
        user_agent: str = DEFAULT_USER_AGENT,
        timezone: str = DEFAULT_TIMEZONE,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[object]] | None = None,
    ) -> None:
        self.store = store
        self.user_agent = user_agent
        self.timezone = timezone
        self.recorder = HistoryRecorder(store)
        self._transport = transport  # tests inject httpx.MockTransport
        self._sleep = sleep or asyncio.sleep

    # ── Inputs (read fresh on every execution) ───────────────────────────

    def load_targets(self) -> list[str]:
        return get_typed(self.store, URLS_KEY, TargetList, [])

    def load_policy(self) -> RetryPolicy:
        return get_typed(self.store, SETTINGS_KEY, RetryPolicyAdapter, RetryPolicy())

    # ── Pipeline ─────────────────────────────────────────────────────────

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
            transport=self._transport,
        )

    async def execute(self, trigger: TriggerKind) -> LogEntry | None:
        """Run one execution. Returns the recorded entry, or None if no targets.

        StoreError from reading inputs or writing history propagates.
        """
        targets = self.load_targets()
        if not targets:
            logger.info("%s trigger: no targets configured, skipping", trigger.value)
            return None

        policy = self.load_policy()
        logger.info(
            "%s trigger: probing %d target(s) (maxRetries=%d, delay=%ds)",
            trigger.value, len(targets), policy.maxRetries, policy.delaySeconds,
        )

        async with self._client() as client:
            runner = RetryRunner(client, sleep=self._sleep)
            entry = await execute_all(targets, policy, trigger, runner, tz=self.timezone)

        if entry is not None:
            self.recorder.record(entry)
        return entry

    def history(self) -> list[LogEntry]:
        return self.recorder.load()
