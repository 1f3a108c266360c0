"""
FastAPI application serving the latest telemetry view.

Routes:
- GET /data: latest raw reading plus derived metrics. 503 before the first
  successful poll, 500 when the most recent poll failed.
- GET /health: liveness plus poll bookkeeping. No data is required.

The read routes are plain ``def`` handlers, so FastAPI runs them in its
worker thread pool: readers run in parallel with each other and with the
poller, and the engine's read/write lock keeps every view consistent.

The application lifespan starts the poller as a background task and stops
it on shutdown.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, HTTPException, Request

from solarmon.src.engine import TelemetryEngine
from solarmon.src.errors import AcquisitionError, NoDataYetError
from solarmon.src.poller import DEFAULT_POLL_INTERVAL_S
from solarmon.src.query import QueryFacade

if TYPE_CHECKING:
    from solarmon.src.poller import Poller

logger = logging.getLogger(__name__)

_SHUTDOWN_GRACE_S: float = 15.0
"""Seconds to let an in-flight poll cycle finish on shutdown."""


def create_app(
    *,
    engine: TelemetryEngine | None = None,
    poller: Poller | None = None,
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
) -> FastAPI:
    """Build the FastAPI application around one engine.

    Args:
        engine: Engine to serve. A fresh one is created when omitted.
        poller: Poller to run for the lifetime of the app, or None to serve
            the engine without polling.
        poll_interval_s: Seconds between poll cycles.

    Returns:
        FastAPI: The configured application.
    """
    if engine is None:
        engine = TelemetryEngine()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Start the poll loop on startup and stop it on shutdown."""
        shutdown_event = asyncio.Event()
        task: asyncio.Task[None] | None = None
        if poller is not None:
            task = asyncio.create_task(
                poller.run(interval_s=poll_interval_s, shutdown_event=shutdown_event)
            )
        logger.info("Solar monitor API ready")
        yield
        logger.info("Solar monitor API shutting down")
        shutdown_event.set()
        if task is not None:
            try:
                await asyncio.wait_for(task, timeout=_SHUTDOWN_GRACE_S)
            except TimeoutError:
                logger.warning(
                    "Poll loop did not stop within %ss, cancelled", _SHUTDOWN_GRACE_S
                )

    app = FastAPI(
        title="Solar Monitor",
        description="Latest Selectronic telemetry with rolling-window metrics.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.query = QueryFacade(engine)

    @app.get("/data")
    def data(request: Request) -> dict[str, Any]:
        """Return the latest reading merged with derived metrics.

        Raises:
            HTTPException: 500 if the most recent poll failed.
            HTTPException: 503 if no poll has succeeded yet.
        """
        view = request.app.state.query.current_view()
        try:
            return view.to_payload()
        except AcquisitionError as exc:
            raise HTTPException(
                status_code=500,
                detail=f"Failed to fetch data: {exc}",
            ) from exc
        except NoDataYetError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc

    @app.get("/health")
    def health(request: Request) -> dict[str, Any]:
        """Return liveness and poll bookkeeping."""
        return {"status": "ok", **request.app.state.engine.status()}

    return app
