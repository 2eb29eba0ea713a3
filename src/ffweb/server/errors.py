"""Standardized API error responses for the development backend.

All error responses carry:
- ``error``: Human-readable error message
- ``code``: Machine-readable error code string
- ``details`` (optional): Field-level validation errors

Handlers raise domain exceptions; the handle_errors decorator maps them to
responses.

Usage:
    from ffweb.server.errors import api_error, NOT_FOUND

    return api_error("Task not found", code=NOT_FOUND, status=404)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

from aiohttp import web

from ffweb.exceptions import (
    BuiltinPresetError,
    FfwebError,
    InvalidTransitionError,
    NotFoundError,
    SchemaError,
)

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

# --- Error code constants ---

INVALID_JSON = "INVALID_JSON"
VALIDATION_FAILED = "VALIDATION_FAILED"
NOT_FOUND = "NOT_FOUND"
INVALID_TRANSITION = "INVALID_TRANSITION"
BUILTIN_PRESET = "BUILTIN_PRESET"


class InvalidJsonError(FfwebError):
    """Raised when a request body is not valid JSON."""


def api_error(
    message: str,
    *,
    code: str,
    status: int = 400,
    details: Any = None,
) -> web.Response:
    """Create a standardized JSON error response.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (use constants from this module).
        status: HTTP status code (default 400).
        details: Optional additional context.

    Returns:
        aiohttp JSON response with ``{"error": ..., "code": ...}`` body.
    """
    body: dict[str, Any] = {"error": message, "code": code}
    if details is not None:
        body["details"] = details
    return web.json_response(body, status=status)


async def read_json(request: web.Request) -> Any:
    """Decode the request body.

    Raises:
        InvalidJsonError: If the body is not valid UTF-8 JSON.
    """
    try:
        return await request.json()
    except ValueError as e:
        # JSONDecodeError, or UnicodeDecodeError for a non-UTF-8 body
        detail = e.msg if isinstance(e, json.JSONDecodeError) else str(e)
        raise InvalidJsonError(f"Invalid JSON body: {detail}") from e


def handle_errors(handler: Handler) -> Handler:
    """Decorator mapping domain exceptions to API error responses."""

    @wraps(handler)
    async def wrapper(request: web.Request) -> web.StreamResponse:
        try:
            return await handler(request)
        except InvalidJsonError as e:
            return api_error(str(e), code=INVALID_JSON)
        except SchemaError as e:
            return api_error(
                e.message,
                code=VALIDATION_FAILED,
                details=json.loads(json.dumps(e.errors, default=str)),
            )
        except NotFoundError as e:
            return api_error(str(e), code=NOT_FOUND, status=404)
        except InvalidTransitionError as e:
            logger.debug("Rejected %s on %s task", e.action, e.status)
            return api_error(str(e), code=INVALID_TRANSITION, status=409)
        except BuiltinPresetError as e:
            return api_error(str(e), code=BUILTIN_PRESET, status=403)

    return wrapper
