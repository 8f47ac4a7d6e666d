"""FastAPI server for the keep-alive engine."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from keepalive import __version__
from keepalive.api.routes import router
from keepalive.config import settings
from keepalive.engine.pipeline import KeepAliveEngine
from keepalive.engine.scheduler import CronScheduler
from keepalive.storage.kv import SQLiteKVStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Wire store, engine and scheduler; drain scheduled runs on shutdown."""
    store = SQLiteKVStore(settings.kv_db_path)
    app.state.store = store

    engine = KeepAliveEngine(
        store,
        user_agent=settings.user_agent,
        timezone=settings.display_timezone,
    )
    app.state.engine = engine

    scheduler: CronScheduler | None = None
    if settings.cron_enabled:
        scheduler = CronScheduler(engine, interval=settings.cron_interval_seconds)
        try:
            await scheduler.start()
        except Exception:
            logger.exception("Cron scheduler failed to start")
    else:
        logger.info("Cron trigger disabled — manual executions only")
    app.state.scheduler = scheduler

    yield

    # Shutdown: scheduled executions must finish before the store closes
    if scheduler is not None:
        await scheduler.stop()
    store.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Keep-Alive Engine",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(router, prefix="/api")
    return app


app = create_app()
