"""Fan-out of RetryRunner over all targets, assembled into a LogEntry."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from datetime import datetime
from zoneinfo import ZoneInfo

from .models import LogEntry, RetryPolicy, TriggerKind
from .retry import RetryRunner

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Shanghai"


def format_timestamp(epoch_ms: int, tz: str = DEFAULT_TIMEZONE) -> str:
    """Render epoch milliseconds as ``YYYY/M/D HH:MM:SS`` in ``tz``."""
    dt = datetime.fromtimestamp(epoch_ms / 1000, ZoneInfo(tz))
    return f"{dt.year}/{dt.month}/{dt.day} {dt:%H:%M:%S}"


async def execute_all(
    targets: Sequence[str],
    policy: RetryPolicy,
    trigger: TriggerKind,
    runner: RetryRunner,
    tz: str = DEFAULT_TIMEZONE,
) -> LogEntry | None:
    """Probe every target concurrently and build the execution's LogEntry.

    Returns None for an empty target list. One failing target never cancels
    the others; results keep the order of ``targets``. If a runner raises or
    the caller is cancelled, the remaining probes are cancelled and awaited
    before the error propagates.
    """
    if not targets:
        logger.info("No targets configured, nothing to execute")
        return None

    started_ms = int(time.time() * 1000)
    tasks = [
        asyncio.create_task(runner.run(url, policy), name=f"probe-{i}")
        for i, url in enumerate(targets)
    ]
    # gather returns results positionally, independent of completion order
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    entry = LogEntry(
        id=started_ms,
        timestamp=format_timestamp(started_ms, tz),
        trigger=trigger,
        results=list(results),
    )
    logger.info(
        "%s execution %d: %d/%d targets ok",
        trigger.value, entry.id, sum(1 for r in results if r.ok), len(results),
    )
    return entry
