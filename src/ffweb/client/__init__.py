"""REST API client for the ffweb backend.

Usage:
    from ffweb.client import ApiClient

    with ApiClient("http://localhost:8080") as client:
        preview = client.preview_command(config)
"""

from ffweb.exceptions import ApiConnectionError, ApiError

from .api import API_PREFIX, ApiClient

__all__ = [
    "API_PREFIX",
    "ApiClient",
    "ApiConnectionError",
    "ApiError",
]
