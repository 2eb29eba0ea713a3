"""API handlers for settings and the command preview.

Endpoints:
    GET /api/settings - Get backend settings
    PUT /api/settings - Replace backend settings
    POST /api/preview-command - Render the command for a config
"""

from __future__ import annotations

import logging

from aiohttp import web

from ffweb.domain import dump_settings, parse_settings
from ffweb.domain.schemas import PreviewRequest, parse_request
from ffweb.server.errors import handle_errors, read_json
from ffweb.server.store import STORE_KEY
from ffweb.synthesis import preview_command

logger = logging.getLogger(__name__)


@handle_errors
async def api_settings_handler(request: web.Request) -> web.Response:
    """Handle GET /api/settings."""
    return web.json_response(dump_settings(request.app[STORE_KEY].settings))


@handle_errors
async def api_update_settings_handler(request: web.Request) -> web.Response:
    """Handle PUT /api/settings.

    Fields omitted from the body fall back to their defaults.
    """
    settings = parse_settings(await read_json(request))
    request.app[STORE_KEY].settings = settings
    logger.info("Settings updated: %s", settings)
    return web.json_response(dump_settings(settings))


@handle_errors
async def api_preview_command_handler(request: web.Request) -> web.Response:
    """Handle POST /api/preview-command.

    Request body:
        {"config": {...}, "sourceFile": str?}

    Returns:
        ``{"command": str}`` using the configured default output path.
    """
    body = parse_request(PreviewRequest, await read_json(request))
    command = preview_command(
        body.config.to_domain(),
        body.source_file,
        request.app[STORE_KEY].settings.default_output_path,
    )
    return web.json_response({"command": command})


def setup_settings_routes(app: web.Application) -> None:
    """Register settings and preview routes with the application.

    Args:
        app: aiohttp Application to configure.
    """
    app.router.add_get("/api/settings", api_settings_handler)
    app.router.add_put("/api/settings", api_update_settings_handler)
    app.router.add_post("/api/preview-command", api_preview_command_handler)
