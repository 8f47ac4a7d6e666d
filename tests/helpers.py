"""Test doubles shared across the suite."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx


class FakeSleep:
    """Stands in for asyncio.sleep: records requested delays, yields once."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)

    @property
    def total(self) -> float:
        return sum(self.calls)


def make_transport(
    behaviours: dict[str, Any],
    latency: dict[str, float] | None = None,
    seen: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """MockTransport keyed by host.

    A behaviour is either a status code, an exception instance to raise, or a
    list of those consumed one per request (the last one repeats).
    """
    latency = latency or {}
    queues = {h: list(b) if isinstance(b, list) else [b] for h, b in behaviours.items()}

    async def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        host = request.url.host
        if host in latency:
            await asyncio.sleep(latency[host])
        queue = queues[host]
        step = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(step, Exception):
            raise step
        return httpx.Response(step, request=request)

    return httpx.MockTransport(handler)


