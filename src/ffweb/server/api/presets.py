"""API handlers for preset endpoints.

Endpoints:
    GET /api/presets - List presets (built-in first)
    POST /api/presets - Create a user preset
    GET /api/presets/{preset_id} - Get preset detail
    PUT /api/presets/{preset_id} - Update a user preset
    DELETE /api/presets/{preset_id} - Delete a user preset

Built-in presets answer 403 BUILTIN_PRESET to PUT and DELETE.
"""

from __future__ import annotations

from aiohttp import web

from ffweb.domain import dump_preset
from ffweb.domain.schemas import PresetRequest, parse_request
from ffweb.server.errors import handle_errors, read_json
from ffweb.server.store import STORE_KEY


@handle_errors
async def api_presets_handler(request: web.Request) -> web.Response:
    """Handle GET /api/presets."""
    store = request.app[STORE_KEY]
    return web.json_response([dump_preset(p) for p in store.list_presets()])


@handle_errors
async def api_preset_detail_handler(request: web.Request) -> web.Response:
    """Handle GET /api/presets/{preset_id}."""
    store = request.app[STORE_KEY]
    preset = store.get_preset(request.match_info["preset_id"])
    return web.json_response(dump_preset(preset))


@handle_errors
async def api_create_preset_handler(request: web.Request) -> web.Response:
    """Handle POST /api/presets.

    Request body:
        {"name": str, "description": str?, "config": {...}}
    """
    body = parse_request(PresetRequest, await read_json(request))
    preset = request.app[STORE_KEY].create_preset(
        body.name, body.config.to_domain(), body.description
    )
    return web.json_response(dump_preset(preset), status=201)


@handle_errors
async def api_update_preset_handler(request: web.Request) -> web.Response:
    """Handle PUT /api/presets/{preset_id}."""
    body = parse_request(PresetRequest, await read_json(request))
    preset = request.app[STORE_KEY].update_preset(
        request.match_info["preset_id"],
        body.name,
        body.config.to_domain(),
        body.description,
    )
    return web.json_response(dump_preset(preset))


@handle_errors
async def api_delete_preset_handler(request: web.Request) -> web.Response:
    """Handle DELETE /api/presets/{preset_id}."""
    request.app[STORE_KEY].delete_preset(request.match_info["preset_id"])
    return web.Response(status=204)


def setup_preset_routes(app: web.Application) -> None:
    """Register preset API routes with the application.

    Args:
        app: aiohttp Application to configure.
    """
    app.router.add_get("/api/presets", api_presets_handler)
    app.router.add_post("/api/presets", api_create_preset_handler)
    app.router.add_get("/api/presets/{preset_id}", api_preset_detail_handler)
    app.router.add_put("/api/presets/{preset_id}", api_update_preset_handler)
    app.router.add_delete("/api/presets/{preset_id}", api_delete_preset_handler)
