"""Task status state machine.

Legal transitions:

    pending --start--> running
    pending --pause--> paused --resume--> pending
    running --cancel--> cancelled
    running --fail--> failed
    running --complete--> completed

Terminal statuses (completed, failed, cancelled) accept delete and retry.
Running tasks cannot be paused, only cancelled.

The telemetry merge does not go through this module: it overwrites the
status field with whatever the backend reports.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

from ffweb.domain import Task, TaskAction, TaskStatus
from ffweb.exceptions import InvalidTransitionError

_TRANSITIONS: dict[tuple[TaskStatus, TaskAction], TaskStatus] = {
    (TaskStatus.PENDING, TaskAction.START): TaskStatus.RUNNING,
    (TaskStatus.PENDING, TaskAction.PAUSE): TaskStatus.PAUSED,
    (TaskStatus.PAUSED, TaskAction.RESUME): TaskStatus.PENDING,
    (TaskStatus.RUNNING, TaskAction.CANCEL): TaskStatus.CANCELLED,
    (TaskStatus.RUNNING, TaskAction.FAIL): TaskStatus.FAILED,
    (TaskStatus.RUNNING, TaskAction.COMPLETE): TaskStatus.COMPLETED,
}

# Actions that do not change the task itself
_TERMINAL_ACTIONS = frozenset({TaskAction.DELETE, TaskAction.RETRY})


def can_apply(status: TaskStatus, action: TaskAction) -> bool:
    """Return True if ``action`` is legal for a task in ``status``."""
    if action in _TERMINAL_ACTIONS:
        return status.is_terminal
    return (status, action) in _TRANSITIONS


def next_status(status: TaskStatus, action: TaskAction) -> TaskStatus:
    """Return the status reached by applying ``action``.

    Raises:
        InvalidTransitionError: If the action is not legal from ``status``,
            or if it is delete/retry (which do not produce a new status).
    """
    try:
        return _TRANSITIONS[(status, action)]
    except KeyError:
        raise InvalidTransitionError(status.value, action.value) from None


def apply_action(task: Task, action: TaskAction, now: datetime | None = None) -> Task:
    """Apply a status-changing action, returning the updated task.

    Sets ``started_at`` on start and ``completed_at`` on entering a
    terminal status. Completing a task pins progress to 100.

    Raises:
        InvalidTransitionError: If the action is not legal.
    """
    status = next_status(task.status, action)
    now = now or datetime.now(timezone.utc)
    changes: dict[str, object] = {"status": status}

    if action == TaskAction.START:
        changes["started_at"] = now
    if status.is_terminal:
        changes["completed_at"] = now
        changes["eta"] = 0
    if status == TaskStatus.COMPLETED:
        changes["progress"] = 100.0

    return dataclasses.replace(task, **changes)


def ensure_removable(task: Task) -> None:
    """Raise InvalidTransitionError unless ``task`` may be deleted."""
    if not can_apply(task.status, TaskAction.DELETE):
        raise InvalidTransitionError(task.status.value, TaskAction.DELETE.value)


def retry_task(task: Task, new_id: str, now: datetime | None = None) -> Task:
    """Clone a finished task into a brand-new pending task.

    The original task is not modified. Only the source file, output file,
    config, preset and source size carry over; progress and timing reset.

    Raises:
        InvalidTransitionError: If the task is not in a terminal status.
    """
    if not can_apply(task.status, TaskAction.RETRY):
        raise InvalidTransitionError(task.status.value, TaskAction.RETRY.value)

    return Task(
        id=new_id,
        source_file=task.source_file,
        output_file=task.output_file,
        config=task.config,
        preset=task.preset,
        source_file_size=task.source_file_size,
        created_at=now or datetime.now(timezone.utc),
    )
