"""HTTP application for the development backend.

Serves the REST contract under ``/api``, the progress WebSocket and a
health endpoint from an explicit BackendStore. With ``simulate=True`` a
background ProgressSimulator moves tasks through their lifecycle so the
telemetry channel can be exercised without FFmpeg.
"""

from __future__ import annotations

import asyncio
import logging

from aiohttp import web

from ffweb import __version__
from ffweb.server.api import setup_api_routes
from ffweb.server.progress import HUB_KEY, ProgressHub
from ffweb.server.simulator import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_STEP,
    ProgressSimulator,
)
from ffweb.server.store import STORE_KEY, BackendStore

logger = logging.getLogger(__name__)

SIMULATOR_KEY = web.AppKey("simulator", ProgressSimulator)
_SIMULATOR_TASK_KEY = web.AppKey("simulator_task", asyncio.Task)

SIMULATOR_STOP_TIMEOUT = 5.0  # seconds


def create_app(
    store: BackendStore | None = None,
    *,
    simulate: bool = False,
    simulator_interval: float = DEFAULT_INTERVAL_SECONDS,
    simulator_step: float = DEFAULT_STEP,
) -> web.Application:
    """Create and configure the aiohttp Application.

    Args:
        store: Backend state. A fresh BackendStore is used when omitted.
        simulate: Run the progress simulator while the app is up.
        simulator_interval: Seconds between simulator ticks.
        simulator_step: Progress percentage per simulator tick.

    Returns:
        Configured aiohttp Application instance.
    """
    app = web.Application()
    app[STORE_KEY] = store if store is not None else BackendStore()
    app[HUB_KEY] = ProgressHub()

    app.router.add_get("/health", health_handler)
    app.router.add_get("/api/ws/progress", app[HUB_KEY].handle)
    setup_api_routes(app)

    if simulate:
        app[SIMULATOR_KEY] = ProgressSimulator(
            app[STORE_KEY],
            app[HUB_KEY],
            interval_seconds=simulator_interval,
            step=simulator_step,
        )
        app.on_startup.append(_start_simulator)
        app.on_cleanup.append(_stop_simulator)

    app.on_shutdown.append(_close_progress_sockets)
    return app


async def _start_simulator(app: web.Application) -> None:
    """Start the background progress simulator."""
    app[_SIMULATOR_TASK_KEY] = asyncio.create_task(app[SIMULATOR_KEY].run())
    logger.debug("Started progress simulator")


async def _stop_simulator(app: web.Application) -> None:
    """Stop the background progress simulator."""
    app[SIMULATOR_KEY].stop()
    task_handle = app.get(_SIMULATOR_TASK_KEY)
    if task_handle is None or task_handle.done():
        return

    try:
        await asyncio.wait_for(task_handle, timeout=SIMULATOR_STOP_TIMEOUT)
    except asyncio.TimeoutError:
        logger.warning("Progress simulator did not stop in time, cancelling")
        task_handle.cancel()
        try:
            await task_handle
        except asyncio.CancelledError:
            pass


async def _close_progress_sockets(app: web.Application) -> None:
    await app[HUB_KEY].close_all()


async def health_handler(request: web.Request) -> web.Response:
    """Handle GET /health requests.

    Returns:
        JSON response with version, task count and connected clients.
    """
    return web.json_response(
        {
            "status": "healthy",
            "version": __version__,
            "tasks": len(request.app[STORE_KEY].list_tasks()),
            "progress_clients": len(request.app[HUB_KEY]),
        }
    )
