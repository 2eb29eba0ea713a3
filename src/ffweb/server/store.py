"""In-memory state for the development backend.

All mutable backend state (tasks, presets, settings) lives in one
BackendStore instance that create_app() attaches to the application. Every
status change goes through the task state machine; progress reported by
the simulator is merged with the same partial-update rule the client uses.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone

from aiohttp import web

from ffweb.domain import (
    Preset,
    ProgressUpdate,
    Settings,
    Task,
    TaskAction,
    TaskStatus,
    TranscodeConfig,
)
from ffweb.exceptions import BuiltinPresetError, NotFoundError
from ffweb.presets import BUILTIN_PRESETS
from ffweb.synthesis import command_as_string, resolve_output_path, synthesize
from ffweb.tasks import apply_action, ensure_removable, merge_progress, retry_task

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class BackendStore:
    """Tasks, presets and settings served by the development backend.

    Args:
        settings: Initial settings; defaults to Settings().
        presets: Presets to seed with; defaults to the built-in catalogue.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        presets: Iterable[Preset] = BUILTIN_PRESETS,
    ) -> None:
        self.settings = settings or Settings()
        self._tasks: dict[str, Task] = {}
        self._presets: dict[str, Preset] = {p.id: p for p in presets}

    # Tasks

    def list_tasks(self) -> list[Task]:
        """Return all tasks in creation order."""
        return list(self._tasks.values())

    def tasks_by_status(self, status: TaskStatus) -> list[Task]:
        """Return tasks currently in ``status``, in creation order."""
        return [t for t in self._tasks.values() if t.status == status]

    def get_task(self, task_id: str) -> Task:
        """Return a task.

        Raises:
            NotFoundError: If no task has ``task_id``.
        """
        try:
            return self._tasks[task_id]
        except KeyError:
            raise NotFoundError("task", task_id) from None

    def create_tasks(
        self,
        source_files: list[str],
        config: TranscodeConfig | None = None,
        preset_id: str | None = None,
    ) -> list[Task]:
        """Create one pending task per source file.

        When ``config`` is omitted the preset's configuration is used, or
        the default configuration if no preset is named either.

        Raises:
            NotFoundError: If ``preset_id`` is given but unknown.
        """
        if preset_id is not None:
            preset = self.get_preset(preset_id)
            if config is None:
                config = preset.config
        if config is None:
            config = TranscodeConfig()

        default_dir = self.settings.default_output_path
        created = []
        for source_file in source_files:
            task = Task(
                id=_new_id(),
                source_file=source_file,
                output_file=resolve_output_path(
                    source_file, config.output, default_dir
                ),
                config=config,
                actual_command=command_as_string(
                    synthesize(
                        config,
                        source_file,
                        default_dir,
                        program=self.settings.ffmpeg_path,
                    )
                ),
                preset=preset_id,
                created_at=_now(),
            )
            self._tasks[task.id] = task
            created.append(task)

        logger.info("Created %d task(s)", len(created))
        return created

    def apply(self, task_id: str, action: TaskAction) -> Task:
        """Apply a status-changing action to a task.

        Raises:
            NotFoundError: If the task does not exist.
            InvalidTransitionError: If the action is illegal.
        """
        task = apply_action(self.get_task(task_id), action, now=_now())
        self._tasks[task_id] = task
        logger.debug("Task %s -> %s", task_id, task.status.value)
        return task

    def retry(self, task_id: str) -> Task:
        """Clone a finished task into a new pending task."""
        clone = retry_task(self.get_task(task_id), _new_id(), now=_now())
        self._tasks[clone.id] = clone
        logger.info("Retried task %s as %s", task_id, clone.id)
        return clone

    def delete_task(self, task_id: str) -> None:
        """Delete a finished task."""
        ensure_removable(self.get_task(task_id))
        del self._tasks[task_id]

    def record_progress(self, update: ProgressUpdate) -> Task:
        """Merge a progress update into the stored task and return it."""
        task = merge_progress(self.get_task(update.task_id), update)
        self._tasks[task.id] = task
        return task

    # Presets

    def list_presets(self) -> list[Preset]:
        """Return built-in presets first, then user presets."""
        presets = list(self._presets.values())
        return [p for p in presets if p.is_builtin] + [
            p for p in presets if not p.is_builtin
        ]

    def get_preset(self, preset_id: str) -> Preset:
        """Return a preset.

        Raises:
            NotFoundError: If no preset has ``preset_id``.
        """
        try:
            return self._presets[preset_id]
        except KeyError:
            raise NotFoundError("preset", preset_id) from None

    def create_preset(
        self, name: str, config: TranscodeConfig, description: str = ""
    ) -> Preset:
        """Create a user preset."""
        preset = Preset(
            id=_new_id(),
            name=name,
            description=description,
            config=config,
            created_at=_now(),
        )
        self._presets[preset.id] = preset
        return preset

    def update_preset(
        self,
        preset_id: str,
        name: str,
        config: TranscodeConfig,
        description: str = "",
    ) -> Preset:
        """Replace a user preset's fields.

        Raises:
            NotFoundError: If the preset does not exist.
            BuiltinPresetError: If the preset is built-in.
        """
        existing = self._editable_preset(preset_id, "update")
        preset = Preset(
            id=preset_id,
            name=name,
            description=description,
            config=config,
            created_at=existing.created_at,
        )
        self._presets[preset_id] = preset
        return preset

    def delete_preset(self, preset_id: str) -> None:
        """Delete a user preset."""
        self._editable_preset(preset_id, "delete")
        del self._presets[preset_id]

    def _editable_preset(self, preset_id: str, operation: str) -> Preset:
        preset = self.get_preset(preset_id)
        if preset.is_builtin:
            raise BuiltinPresetError(preset_id, operation)
        return preset


STORE_KEY = web.AppKey("store", BackendStore)
