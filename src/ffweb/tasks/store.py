"""Task store bridge.

Keeps a local task collection in sync with telemetry. A ProgressUpdate only
replaces the fields it carries; updates for unknown task IDs are ignored
(a telemetry event never creates a task). A full refresh from GET /tasks
reconciles anything missed while the channel was down.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable

from ffweb.domain import ProgressUpdate, Task, TaskStatus

logger = logging.getLogger(__name__)

TaskListener = Callable[[Task], None]


def merge_progress(task: Task, update: ProgressUpdate) -> Task:
    """Return ``task`` with the fields present in ``update`` applied.

    The status field is overwritten without checking the state machine.
    """
    changes = update.changes()
    if not changes:
        return task
    return dataclasses.replace(task, **changes)


class TaskStore:
    """Ordered, in-memory task collection fed by telemetry.

    Not thread-safe; intended to be driven from a single event loop, with
    ``apply`` passed as the channel's ``on_message`` callback.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: dict[str, Task] = {}
        self._listeners: list[TaskListener] = []
        self.replace_all(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def get(self, task_id: str) -> Task | None:
        """Return the task with ``task_id``, or None."""
        return self._tasks.get(task_id)

    def all(self) -> list[Task]:
        """Return all tasks in insertion order."""
        return list(self._tasks.values())

    def by_status(self, *statuses: TaskStatus) -> list[Task]:
        """Return tasks whose status is one of ``statuses``."""
        return [t for t in self._tasks.values() if t.status in statuses]

    def subscribe(self, listener: TaskListener) -> None:
        """Register a callback invoked with each changed or refreshed task."""
        self._listeners.append(listener)

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Replace the collection with a fresh task list.

        Listeners are called once per task in the new list.
        """
        self._tasks = {task.id: task for task in tasks}
        for task in list(self._tasks.values()):
            self._notify(task)

    def apply(self, update: ProgressUpdate) -> Task | None:
        """Merge a telemetry update into the matching task.

        Returns:
            The merged task, or None if the task ID is unknown.
        """
        task = self._tasks.get(update.task_id)
        if task is None:
            logger.debug("Ignoring progress for unknown task %s", update.task_id)
            return None

        merged = merge_progress(task, update)
        self._tasks[merged.id] = merged
        self._notify(merged)
        return merged

    def _notify(self, task: Task) -> None:
        for listener in self._listeners:
            listener(task)
