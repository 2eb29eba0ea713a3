"""CLI serve command for the development backend."""

from __future__ import annotations

import logging

import click

from .common import get_config

logger = logging.getLogger(__name__)


@click.command("serve")
@click.option("--bind", default=None, help="Address to bind to.")
@click.option("--port", type=int, default=None, help="Port to listen on.")
@click.option(
    "--simulate/--no-simulate",
    default=None,
    help="Advance tasks with the progress simulator instead of FFmpeg.",
)
@click.pass_context
def serve_command(
    ctx: click.Context,
    bind: str | None,
    port: int | None,
    simulate: bool | None,
) -> None:
    """Run the in-memory development backend.

    Serves the REST API under /api and live progress on /api/ws/progress.
    State is kept in memory and lost on exit.
    """
    from aiohttp import web

    from ffweb.server import BackendStore, create_app

    config = get_config(ctx)
    server = config.server
    bind = bind or server.bind
    port = port or server.port
    simulate = server.simulate if simulate is None else simulate

    store = BackendStore(settings=config.settings.to_settings())
    app = create_app(
        store,
        simulate=simulate,
        simulator_interval=server.simulator_interval,
    )
    logger.info(
        "Starting development backend on %s:%d (simulate=%s)", bind, port, simulate
    )
    web.run_app(app, host=bind, port=port, print=None)
