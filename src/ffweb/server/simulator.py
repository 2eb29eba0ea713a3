"""Background progress simulator for the development backend.

No FFmpeg process is spawned. Each tick promotes pending tasks into free
worker slots (``Settings.max_concurrent_tasks``), advances running tasks by
a fixed step and completes them at 100%, broadcasting every change on the
progress hub exactly as a real worker pool would.

Usage:
    simulator = ProgressSimulator(store, hub, interval_seconds=1.0)
    asyncio.create_task(simulator.run())
    # ... later ...
    simulator.stop()
"""

from __future__ import annotations

import asyncio
import logging

from ffweb.domain import ProgressUpdate, TaskAction, TaskStatus

from .progress import ProgressHub
from .store import BackendStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 1.0
DEFAULT_STEP = 5.0  # percent per tick
SIMULATED_SPEED = 1.5  # x realtime


class ProgressSimulator:
    """Drives tasks through running to completed on a timer."""

    def __init__(
        self,
        store: BackendStore,
        hub: ProgressHub,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        step: float = DEFAULT_STEP,
    ) -> None:
        """Initialize the simulator.

        Args:
            store: Backend state to mutate.
            hub: Hub that receives every resulting ProgressUpdate.
            interval_seconds: Seconds between ticks.
            step: Progress percentage added to each running task per tick.
        """
        if step <= 0:
            raise ValueError(f"step must be > 0, got {step}")
        self.store = store
        self.hub = hub
        self.interval_seconds = interval_seconds
        self.step = step
        self._stop_event = asyncio.Event()
        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if the simulator loop is running."""
        return self._running

    def stop(self) -> None:
        """Signal the simulator loop to stop."""
        self._stop_event.set()

    async def run(self) -> None:
        """Tick until stop() is called."""
        if self._running:
            logger.warning("Progress simulator already running")
            return
        self._running = True
        logger.info(
            "Progress simulator started (interval %.1fs)", self.interval_seconds
        )

        try:
            while not self._stop_event.is_set():
                await self.tick()
                try:
                    await asyncio.wait_for(
                        self._stop_event.wait(), timeout=self.interval_seconds
                    )
                except asyncio.TimeoutError:
                    pass  # Normal case - interval elapsed
        finally:
            self._running = False
            logger.info("Progress simulator stopped")

    async def tick(self) -> list[ProgressUpdate]:
        """Advance the simulation by one step and broadcast the changes.

        Returns:
            The updates broadcast during this tick, in order.
        """
        updates = self._advance_running()
        updates.extend(self._start_pending())
        for update in updates:
            await self.hub.broadcast(update)
        return updates

    def _start_pending(self) -> list[ProgressUpdate]:
        running = len(self.store.tasks_by_status(TaskStatus.RUNNING))
        free = max(self.store.settings.max_concurrent_tasks - running, 0)
        updates = []
        for task in self.store.tasks_by_status(TaskStatus.PENDING)[:free]:
            task = self.store.apply(task.id, TaskAction.START)
            logger.debug("Started task %s", task.id)
            updates.append(
                ProgressUpdate(task_id=task.id, status=task.status, progress=0.0)
            )
        return updates

    def _advance_running(self) -> list[ProgressUpdate]:
        updates = []
        for task in self.store.tasks_by_status(TaskStatus.RUNNING):
            progress = min(task.progress + self.step, 100.0)
            if progress >= 100.0:
                task = self.store.apply(task.id, TaskAction.COMPLETE)
                updates.append(
                    ProgressUpdate(
                        task_id=task.id, status=task.status, progress=100.0, eta=0
                    )
                )
                logger.info("Task %s completed", task.id)
                continue

            remaining_ticks = (100.0 - progress) / self.step
            update = ProgressUpdate(
                task_id=task.id,
                progress=progress,
                speed=SIMULATED_SPEED,
                eta=round(remaining_ticks * self.interval_seconds),
            )
            self.store.record_progress(update)
            updates.append(update)
        return updates
