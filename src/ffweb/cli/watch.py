"""CLI command that follows task progress over the telemetry channel."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Callable

import click

from ffweb.client import ApiClient
from ffweb.config import TelemetryConfig
from ffweb.domain import ProgressUpdate, Task, dump_task
from ffweb.exceptions import FfwebError
from ffweb.tasks import TaskStore
from ffweb.telemetry import TelemetryChannel

from .common import get_config, json_option, make_client
from .exit_codes import ExitCode
from .output import fail, format_task_line

logger = logging.getLogger(__name__)

# How often the watch loop checks whether the channel gave up
POLL_INTERVAL = 0.5  # seconds


def _all_finished(store: TaskStore, task_ids: set[str] | None) -> bool:
    tasks = store.all()
    if task_ids:
        tasks = [t for t in tasks if t.id in task_ids]
    return all(t.status.is_terminal for t in tasks)


async def watch_tasks(
    client: ApiClient,
    telemetry_url: str,
    telemetry: TelemetryConfig,
    emit: Callable[[Task], None],
    task_ids: set[str] | None = None,
    until_done: bool = False,
) -> ExitCode:
    """Stream task changes to ``emit`` until done, interrupted or disconnected.

    The store is seeded from GET /tasks and refreshed the same way after
    every reconnect, since updates sent while the channel was down are lost.
    Frames that arrive while a refresh is in flight are replayed on top of
    the fetched snapshot.

    Returns:
        SUCCESS when ``until_done`` is satisfied, TELEMETRY_LOST when the
        channel exhausts its reconnect attempts.
    """
    store = TaskStore(await asyncio.to_thread(client.list_tasks))
    done = asyncio.Event()
    refreshes: set[asyncio.Task[None]] = set()
    buffers: list[list[ProgressUpdate]] = []
    opened = 0

    if until_done and _all_finished(store, task_ids):
        return ExitCode.SUCCESS

    def on_change(task: Task) -> None:
        if task_ids and task.id not in task_ids:
            return
        emit(task)
        if until_done and _all_finished(store, task_ids):
            done.set()

    def on_update(update: ProgressUpdate) -> None:
        for buffer in buffers:
            buffer.append(update)
        store.apply(update)

    async def refresh(buffer: list[ProgressUpdate]) -> None:
        try:
            tasks = await asyncio.to_thread(client.list_tasks)
        except FfwebError as e:
            logger.warning("Task refresh after reconnect failed: %s", e)
            return
        finally:
            buffers.remove(buffer)

        store.replace_all(tasks)
        for update in buffer:
            store.apply(update)
        if until_done and _all_finished(store, task_ids):
            done.set()

    def on_open() -> None:
        nonlocal opened
        opened += 1
        if opened > 1:
            # Registered before any frame of this connection is dispatched
            buffer: list[ProgressUpdate] = []
            buffers.append(buffer)
            task = asyncio.get_running_loop().create_task(refresh(buffer))
            refreshes.add(task)
            task.add_done_callback(refreshes.discard)

    store.subscribe(on_change)
    channel = TelemetryChannel(
        telemetry_url,
        on_update,
        on_open=on_open,
        max_reconnect_attempts=telemetry.max_reconnect_attempts,
        base_delay_ms=telemetry.base_delay_ms,
        max_delay_ms=telemetry.max_delay_ms,
        heartbeat=telemetry.heartbeat,
    )
    channel.open()
    try:
        while not done.is_set():
            if channel.exhausted:
                return ExitCode.TELEMETRY_LOST
            try:
                await asyncio.wait_for(done.wait(), timeout=POLL_INTERVAL)
            except asyncio.TimeoutError:
                pass  # Normal case - check the channel again
        return ExitCode.SUCCESS
    finally:
        await channel.aclose()
        for task in refreshes:
            task.cancel()


@click.command("watch")
@click.argument("task_ids", nargs=-1)
@click.option(
    "--until-done",
    is_flag=True,
    help="Exit once every watched task is completed, failed or cancelled.",
)
@json_option
@click.pass_context
def watch_command(
    ctx: click.Context,
    task_ids: tuple[str, ...],
    until_done: bool,
    json_output: bool,
) -> None:
    """Follow live progress for TASK_IDS (all tasks if none given).

    Prints one line per task change. Exits with code 31 if the telemetry
    connection cannot be re-established.
    """
    config = get_config(ctx)

    def emit(task: Task) -> None:
        if json_output:
            click.echo(json.dumps(dump_task(task)))
        else:
            click.echo(format_task_line(task))

    client = make_client(ctx)
    try:
        code = asyncio.run(
            watch_tasks(
                client,
                config.telemetry_url,
                config.telemetry,
                emit,
                task_ids=set(task_ids) or None,
                until_done=until_done,
            )
        )
    except FfwebError as e:
        fail(e, json_output)
    except KeyboardInterrupt:
        sys.exit(ExitCode.INTERRUPTED)
    finally:
        client.close()

    if code == ExitCode.TELEMETRY_LOST:
        click.echo("Error: telemetry connection lost", err=True)
    sys.exit(code)
