"""Single HTTP probe — one GET, classified as success or failure."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of a single attempt."""

    ok: bool
    status: int | None = None
    elapsed_ms: int | None = None
    error: str | None = None


async def probe(client: httpx.AsyncClient, url: str) -> ProbeOutcome:
    """GET ``url`` and classify: 2xx is success, anything else is a failure.

    Redirects and the user-agent header are configured on ``client``.
    Transport errors are returned as failures, not raised.
    """
    t0 = time.perf_counter()
    try:
        resp = await client.get(url)
    except Exception as e:
        # httpx.HTTPError, but also httpx.InvalidURL which sits outside it
        logger.debug("Probe %s transport error: %s: %s", url, type(e).__name__, e)
        return ProbeOutcome(ok=False, error=str(e) or type(e).__name__)

    elapsed = int((time.perf_counter() - t0) * 1000)
    logger.debug("Probe %s: %d (%dms)", url, resp.status_code, elapsed)
    if resp.is_success:
        return ProbeOutcome(ok=True, status=resp.status_code, elapsed_ms=elapsed)
    return ProbeOutcome(ok=False, status=resp.status_code, error=f"HTTP {resp.status_code}")
