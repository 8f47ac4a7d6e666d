"""Scheduled trigger — runs a CRON execution at a fixed interval.

Uses a simple asyncio loop rather than a cron library. Each scheduled
execution is spawned as its own task and tracked, so stop() can wait for
in-flight executions to finish instead of dropping them mid-write.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from .models import TriggerKind
from .pipeline import KeepAliveEngine

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 600  # seconds


class CronScheduler:
    """Fires KeepAliveEngine.execute(CRON) every ``interval`` seconds.

    Lifecycle:
        scheduler = CronScheduler(engine, interval=600)
        await scheduler.start()
        ...
        await scheduler.stop()   # waits for in-flight executions
    """

    def __init__(self, engine: KeepAliveEngine, interval: int = DEFAULT_INTERVAL) -> None:
        self.engine = engine
        self.interval = interval
        self._task: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._running = False
        self.last_run: str | None = None
        self.last_error: str | None = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name="keepalive-cron")
        logger.info("Cron scheduler started (interval=%ds)", self.interval)

    async def stop(self) -> None:
        """Stop firing new executions, then wait for the ones already running."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._inflight:
            logger.info("Waiting for %d scheduled execution(s) to finish", len(self._inflight))
            await asyncio.gather(*self._inflight, return_exceptions=True)
        logger.info("Cron scheduler stopped")

    def fire(self) -> asyncio.Task[None]:
        """Spawn one scheduled execution as a tracked background task."""
        task = asyncio.create_task(self._run_once(), name=f"keepalive-cron-run-{self.runs + 1}")
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    def status(self) -> dict[str, Any]:
        return {
            "running": self._running,
            "interval_seconds": self.interval,
            "in_flight": len(self._inflight),
            "runs": self.runs,
            "last_run": self.last_run,
            "last_error": self.last_error,
        }

    # -- internals -------------------------------------------------------------

    async def _loop(self) -> None:
        while self._running:
            await asyncio.sleep(self.interval)
            if not self._running:
                break
            self.fire()

    async def _run_once(self) -> None:
        self.runs += 1
        self.last_run = datetime.now(timezone.utc).isoformat()
        try:
            await self.engine.execute(TriggerKind.CRON)
            self.last_error = None
        except Exception as e:
            self.last_error = f"{type(e).__name__}: {e}"
            logger.exception("Scheduled execution failed")
