"""API handlers for task endpoints.

Endpoints:
    GET /api/tasks - List tasks
    POST /api/tasks - Create one task per source file
    GET /api/tasks/{task_id} - Get task detail
    PUT /api/tasks/{task_id}/cancel - Cancel a running task
    PUT /api/tasks/{task_id}/pause - Pause a pending task
    PUT /api/tasks/{task_id}/resume - Resume a paused task
    POST /api/tasks/{task_id}/retry - Clone a finished task
    DELETE /api/tasks/{task_id} - Delete a finished task

Status changes are broadcast on the progress hub so connected clients see
them without polling.
"""

from __future__ import annotations

import logging

from aiohttp import web

from ffweb.domain import ProgressUpdate, TaskAction, dump_task
from ffweb.domain.schemas import CreateTasksRequest, parse_request
from ffweb.server.errors import Handler, handle_errors, read_json
from ffweb.server.progress import HUB_KEY
from ffweb.server.store import STORE_KEY

logger = logging.getLogger(__name__)


@handle_errors
async def api_tasks_handler(request: web.Request) -> web.Response:
    """Handle GET /api/tasks."""
    store = request.app[STORE_KEY]
    return web.json_response([dump_task(t) for t in store.list_tasks()])


@handle_errors
async def api_task_detail_handler(request: web.Request) -> web.Response:
    """Handle GET /api/tasks/{task_id}."""
    store = request.app[STORE_KEY]
    task = store.get_task(request.match_info["task_id"])
    return web.json_response(dump_task(task))


@handle_errors
async def api_create_tasks_handler(request: web.Request) -> web.Response:
    """Handle POST /api/tasks.

    Request body:
        {"sourceFiles": [...], "preset": "id"?, "config": {...}?}

    Returns:
        201 with the created tasks.
    """
    body = parse_request(CreateTasksRequest, await read_json(request))
    store = request.app[STORE_KEY]
    tasks = store.create_tasks(
        body.source_files,
        config=body.config.to_domain() if body.config else None,
        preset_id=body.preset,
    )
    return web.json_response([dump_task(t) for t in tasks], status=201)


def _status_change_handler(action: TaskAction) -> Handler:
    """Build the PUT handler that applies ``action`` to a task."""

    @handle_errors
    async def handler(request: web.Request) -> web.Response:
        store = request.app[STORE_KEY]
        task = store.apply(request.match_info["task_id"], action)
        eta = 0 if task.status.is_terminal else None
        await request.app[HUB_KEY].broadcast(
            ProgressUpdate(task_id=task.id, status=task.status, eta=eta)
        )
        logger.info("Task %s %s", task.id, task.status.value)
        return web.json_response(dump_task(task))

    handler.__name__ = f"api_task_{action.value}_handler"
    return handler


@handle_errors
async def api_task_retry_handler(request: web.Request) -> web.Response:
    """Handle POST /api/tasks/{task_id}/retry.

    The original task is left untouched.

    Returns:
        201 with the new pending task.
    """
    store = request.app[STORE_KEY]
    clone = store.retry(request.match_info["task_id"])
    return web.json_response(dump_task(clone), status=201)


@handle_errors
async def api_task_delete_handler(request: web.Request) -> web.Response:
    """Handle DELETE /api/tasks/{task_id}."""
    store = request.app[STORE_KEY]
    store.delete_task(request.match_info["task_id"])
    return web.Response(status=204)


def setup_task_routes(app: web.Application) -> None:
    """Register task API routes with the application.

    Args:
        app: aiohttp Application to configure.
    """
    app.router.add_get("/api/tasks", api_tasks_handler)
    app.router.add_post("/api/tasks", api_create_tasks_handler)
    app.router.add_get("/api/tasks/{task_id}", api_task_detail_handler)
    app.router.add_delete("/api/tasks/{task_id}", api_task_delete_handler)
    for action in (TaskAction.CANCEL, TaskAction.PAUSE, TaskAction.RESUME):
        app.router.add_put(
            f"/api/tasks/{{task_id}}/{action.value}", _status_change_handler(action)
        )
    app.router.add_post("/api/tasks/{task_id}/retry", api_task_retry_handler)
