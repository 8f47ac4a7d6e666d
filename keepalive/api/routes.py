"""API routes for the keep-alive engine.

Endpoints:
  POST /api/execute   — manual trigger; probe all targets and record a log entry
  GET  /api/logs      — rolling history, newest first
  GET  /api/targets   — configured target URLs (read-only)
  GET  /api/settings  — effective retry policy (read-only)
  GET  /api/status    — scheduled trigger status
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from keepalive.engine.models import TriggerKind
from keepalive.engine.pipeline import KeepAliveEngine
from keepalive.storage.kv import StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_engine(request: Request) -> KeepAliveEngine:
    return request.app.state.engine  # type: ignore[no-any-return]


def _store_unavailable(e: StoreError) -> HTTPException:
    logger.error("Store unavailable: %s", e)
    return HTTPException(status_code=503, detail=f"Store unavailable: {e}")


@router.post("/execute")
async def execute(request: Request) -> dict[str, Any]:
    """Run a MANUAL execution and wait for it to finish."""
    engine = _get_engine(request)
    try:
        entry = await engine.execute(TriggerKind.MANUAL)
    except StoreError as e:
        raise _store_unavailable(e) from e

    return {
        "executed": entry is not None,
        "entry": entry.model_dump(mode="json", exclude_none=True) if entry else None,
    }


@router.get("/logs")
def list_logs(request: Request) -> dict[str, Any]:
    engine = _get_engine(request)
    try:
        history = engine.history()
    except StoreError as e:
        raise _store_unavailable(e) from e
    return {"logs": [e.model_dump(mode="json", exclude_none=True) for e in history]}


@router.get("/targets")
def list_targets(request: Request) -> dict[str, Any]:
    engine = _get_engine(request)
    try:
        return {"urls": engine.load_targets()}
    except StoreError as e:
        raise _store_unavailable(e) from e


@router.get("/settings")
def get_settings(request: Request) -> dict[str, Any]:
    engine = _get_engine(request)
    try:
        return engine.load_policy().model_dump()
    except StoreError as e:
        raise _store_unavailable(e) from e


@router.get("/status")
def scheduler_status(request: Request) -> dict[str, Any]:
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        return {"running": False}
    return scheduler.status()
