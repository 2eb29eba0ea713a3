"""Tests for the progress simulator and the progress hub."""

from __future__ import annotations

import asyncio

import pytest

from ffweb.domain import ProgressUpdate, Settings, TaskAction, TaskStatus
from ffweb.server import BackendStore, ProgressHub, ProgressSimulator


class RecordingHub(ProgressHub):
    """ProgressHub that records broadcasts instead of sending them."""

    def __init__(self) -> None:
        super().__init__()
        self.sent: list[ProgressUpdate] = []

    async def broadcast(self, update: ProgressUpdate) -> int:
        self.sent.append(update)
        return 0


@pytest.fixture
def store() -> BackendStore:
    return BackendStore(settings=Settings(max_concurrent_tasks=2))


@pytest.fixture
def hub() -> RecordingHub:
    return RecordingHub()


class TestTick:
    """Tests for ProgressSimulator.tick()."""

    @pytest.mark.asyncio
    async def test_starts_up_to_max_concurrent(self, store, hub):
        a, b, c = store.create_tasks(["/v/a.mkv", "/v/b.mkv", "/v/c.mkv"])
        simulator = ProgressSimulator(store, hub, step=10)

        updates = await simulator.tick()

        assert [u.task_id for u in updates] == [a.id, b.id]
        assert all(u.status == TaskStatus.RUNNING for u in updates)
        assert store.get_task(c.id).status == TaskStatus.PENDING
        assert hub.sent == updates

    @pytest.mark.asyncio
    async def test_advances_running_tasks(self, store, hub):
        (task,) = store.create_tasks(["/v/a.mkv"])
        simulator = ProgressSimulator(store, hub, interval_seconds=2.0, step=25)

        await simulator.tick()  # start
        (update,) = await simulator.tick()

        assert update == ProgressUpdate(
            task_id=task.id, progress=25.0, speed=1.5, eta=6
        )
        assert store.get_task(task.id).progress == 25.0

    @pytest.mark.asyncio
    async def test_completes_at_100_and_frees_slot(self, store, hub):
        first, second, third = store.create_tasks(["/v/a", "/v/b", "/v/c"])
        simulator = ProgressSimulator(store, hub, step=50)

        await simulator.tick()  # start first two
        await simulator.tick()  # 50%
        updates = await simulator.tick()  # complete, start third

        completed = [u for u in updates if u.status == TaskStatus.COMPLETED]
        assert {u.task_id for u in completed} == {first.id, second.id}
        assert store.get_task(first.id).progress == 100.0
        assert store.get_task(third.id).status == TaskStatus.RUNNING

    @pytest.mark.asyncio
    async def test_paused_tasks_are_not_started(self, store, hub):
        (task,) = store.create_tasks(["/v/a.mkv"])
        store.apply(task.id, TaskAction.PAUSE)
        simulator = ProgressSimulator(store, hub)

        assert await simulator.tick() == []

    def test_step_must_be_positive(self, store, hub):
        with pytest.raises(ValueError):
            ProgressSimulator(store, hub, step=0)


class TestRunLoop:
    """Tests for the background loop."""

    @pytest.mark.asyncio
    async def test_run_and_stop(self, store, hub):
        store.create_tasks(["/v/a.mkv"])
        simulator = ProgressSimulator(store, hub, interval_seconds=0.01, step=50)

        task = asyncio.create_task(simulator.run())
        for _ in range(500):
            if store.tasks_by_status(TaskStatus.COMPLETED):
                break
            await asyncio.sleep(0.01)
        assert simulator.is_running

        simulator.stop()
        await asyncio.wait_for(task, timeout=5)

        assert not simulator.is_running
        assert len(store.tasks_by_status(TaskStatus.COMPLETED)) == 1


class TestProgressHub:
    """Tests for ProgressHub bookkeeping."""

    @pytest.mark.asyncio
    async def test_broadcast_without_clients(self):
        hub = ProgressHub()
        assert await hub.broadcast(ProgressUpdate(task_id="t1")) == 0
        assert len(hub) == 0
