"""REST client for the ffweb backend.

Wraps the JSON API under ``/api`` with an httpx client. Responses are
parsed into the frozen domain dataclasses; non-2xx answers raise ApiError
and transport failures raise ApiConnectionError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ffweb.domain import (
    Preset,
    Settings,
    Task,
    TranscodeConfig,
    dump_config,
    dump_settings,
    parse_preset,
    parse_settings,
    parse_task,
)
from ffweb.exceptions import ApiConnectionError, ApiError, BuiltinPresetError
from ffweb.presets import is_builtin_id

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
DEFAULT_TIMEOUT = 10.0


class ApiClient:
    """HTTP client for the ffweb backend API.

    Example:
        with ApiClient("http://localhost:8080") as client:
            tasks = client.list_tasks()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend origin, e.g. ``http://localhost:8080``.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url + API_PREFIX,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(
        self, method: str, path: str, json: Any | None = None
    ) -> Any | None:
        """Send a request and return the decoded JSON body.

        Returns:
            Parsed JSON, or None for empty responses.

        Raises:
            ApiError: If the backend answers with a non-2xx status.
            ApiConnectionError: If the backend cannot be reached.
        """
        client = self._get_client()
        try:
            response = client.request(method, path, json=json)
        except httpx.ConnectError as e:
            raise ApiConnectionError(f"Cannot connect to {self.base_url}: {e}") from e
        except httpx.TimeoutException as e:
            raise ApiConnectionError(f"Connection timeout: {e}") from e
        except httpx.TransportError as e:
            raise ApiConnectionError(f"Transport error: {e}") from e

        logger.debug("%s %s -> %d", method, path, response.status_code)
        if response.is_error:
            raise _error_from_response(response)
        if not response.content:
            return None
        return response.json()

    # Tasks

    def list_tasks(self) -> list[Task]:
        """Return every task known to the backend."""
        return [parse_task(t) for t in self._request("GET", "/tasks") or []]

    def get_task(self, task_id: str) -> Task:
        """Return one task.

        Raises:
            ApiError: With status 404 if the task does not exist.
        """
        return parse_task(self._request("GET", f"/tasks/{task_id}"))

    def create_tasks(
        self,
        source_files: list[str],
        config: TranscodeConfig | None = None,
        preset: str | None = None,
    ) -> list[Task]:
        """Create one pending task per source file.

        Args:
            source_files: Input paths; must not be empty.
            config: Transcode configuration.
            preset: Preset ID to record on the tasks. When ``config`` is
                omitted the backend uses the preset's configuration.

        Returns:
            The created tasks, in input order.
        """
        if not source_files:
            raise ValueError("source_files must not be empty")
        body: dict[str, Any] = {"sourceFiles": list(source_files)}
        if preset is not None:
            body["preset"] = preset
        if config is not None:
            body["config"] = dump_config(config)
        return [parse_task(t) for t in self._request("POST", "/tasks", body) or []]

    def cancel_task(self, task_id: str) -> Task:
        """Cancel a running task."""
        return parse_task(self._request("PUT", f"/tasks/{task_id}/cancel"))

    def pause_task(self, task_id: str) -> Task:
        """Pause a pending task."""
        return parse_task(self._request("PUT", f"/tasks/{task_id}/pause"))

    def resume_task(self, task_id: str) -> Task:
        """Return a paused task to pending."""
        return parse_task(self._request("PUT", f"/tasks/{task_id}/resume"))

    def retry_task(self, task_id: str) -> Task:
        """Clone a finished task into a new pending task and return the clone."""
        return parse_task(self._request("POST", f"/tasks/{task_id}/retry"))

    def delete_task(self, task_id: str) -> None:
        """Delete a finished task."""
        self._request("DELETE", f"/tasks/{task_id}")

    # Presets

    def list_presets(self) -> list[Preset]:
        """Return built-in and user presets."""
        return [parse_preset(p) for p in self._request("GET", "/presets") or []]

    def get_preset(self, preset_id: str) -> Preset:
        """Return one preset."""
        return parse_preset(self._request("GET", f"/presets/{preset_id}"))

    def create_preset(
        self, name: str, config: TranscodeConfig, description: str = ""
    ) -> Preset:
        """Create a user preset."""
        body = {"name": name, "description": description, "config": dump_config(config)}
        return parse_preset(self._request("POST", "/presets", body))

    def update_preset(self, preset: Preset) -> Preset:
        """Replace a user preset's name, description and config.

        Raises:
            BuiltinPresetError: If ``preset`` is built-in. No request is sent.
        """
        _ensure_editable(preset, "update")
        body = {
            "name": preset.name,
            "description": preset.description,
            "config": dump_config(preset.config),
        }
        return parse_preset(self._request("PUT", f"/presets/{preset.id}", body))

    def delete_preset(self, preset: Preset | str) -> None:
        """Delete a user preset, given the preset or its ID.

        Raises:
            BuiltinPresetError: If the preset is built-in. No request is sent.
        """
        _ensure_editable(preset, "delete")
        preset_id = preset.id if isinstance(preset, Preset) else preset
        self._request("DELETE", f"/presets/{preset_id}")

    # Settings

    def get_settings(self) -> Settings:
        """Return the backend settings."""
        return parse_settings(self._request("GET", "/settings"))

    def update_settings(self, settings: Settings) -> Settings:
        """Replace the backend settings."""
        data = self._request("PUT", "/settings", dump_settings(settings))
        return parse_settings(data)

    # Preview

    def preview_command(
        self, config: TranscodeConfig, source_file: str = "input.mp4"
    ) -> str:
        """Ask the backend to render the command it would run."""
        body = {"config": dump_config(config), "sourceFile": source_file}
        data = self._request("POST", "/preview-command", body)
        return data["command"]


def _ensure_editable(preset: Preset | str, operation: str) -> None:
    if isinstance(preset, Preset):
        builtin, preset_id = preset.is_builtin, preset.id
    else:
        builtin, preset_id = is_builtin_id(preset), preset
    if builtin:
        raise BuiltinPresetError(preset_id, operation)


def _error_from_response(response: httpx.Response) -> ApiError:
    """Build an ApiError from an ``{"error", "code"}`` body when present."""
    message = response.reason_phrase or "Request failed"
    code = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = str(body.get("error") or message)
        code = body.get("code")
    return ApiError(response.status_code, message, code)
