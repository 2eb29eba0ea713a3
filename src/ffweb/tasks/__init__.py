"""Task lifecycle and the telemetry-backed task store.

Usage:
    from ffweb.tasks import TaskStore, merge_progress
    from ffweb.tasks import apply_action, retry_task
"""

from .state import (
    apply_action,
    can_apply,
    ensure_removable,
    next_status,
    retry_task,
)
from .store import TaskStore, merge_progress

__all__ = [
    # State machine
    "apply_action",
    "can_apply",
    "ensure_removable",
    "next_status",
    "retry_task",
    # Store
    "TaskStore",
    "merge_progress",
]
