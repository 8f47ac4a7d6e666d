"""Bounded retry loop around a single probe."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx

from .models import ProbeResult, RetryPolicy
from .probe import probe

logger = logging.getLogger(__name__)


class RetryRunner:
    """Runs probe() for one target until it succeeds or the retries run out.

    The delay is applied only between attempts, never after the last one.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self._sleep = sleep

    async def run(self, url: str, policy: RetryPolicy) -> ProbeResult:
        attempt = 0
        while True:
            outcome = await probe(self.client, url)

            if outcome.ok:
                return ProbeResult(
                    url=url,
                    status=outcome.status,
                    ok=True,
                    elapsedMs=outcome.elapsed_ms,
                    attempts=attempt + 1,
                )

            if attempt >= policy.maxRetries:
                logger.info(
                    "Target %s failed after %d attempt(s): %s",
                    url, attempt + 1, outcome.error,
                )
                return ProbeResult(
                    url=url,
                    status=0,
                    ok=False,
                    error=outcome.error,
                    attempts=attempt + 1,
                )

            logger.debug(
                "Target %s attempt %d/%d failed (%s), retrying in %ds",
                url, attempt + 1, policy.maxRetries + 1, outcome.error, policy.delaySeconds,
            )
            await self._sleep(policy.delaySeconds)
            attempt += 1
