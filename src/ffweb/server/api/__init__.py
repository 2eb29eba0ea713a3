"""JSON API route modules for the development backend.

- tasks.py: task listing, creation and lifecycle actions
- presets.py: preset CRUD (built-ins are read-only)
- settings.py: settings and the authoritative command preview
"""

from aiohttp import web

from ffweb.server.api.presets import setup_preset_routes
from ffweb.server.api.settings import setup_settings_routes
from ffweb.server.api.tasks import setup_task_routes

__all__ = [
    "setup_api_routes",
]


def setup_api_routes(app: web.Application) -> None:
    """Register all API routes with the application.

    Args:
        app: aiohttp Application to configure.
    """
    setup_task_routes(app)
    setup_preset_routes(app)
    setup_settings_routes(app)
