"""CLI commands for backend task management."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import click

from ffweb.client import ApiClient
from ffweb.domain import Task, TaskStatus, dump_task
from ffweb.exceptions import FfwebError

from .common import config_file_option, json_option, make_client, read_transcode_config
from .output import echo_json, fail, format_task_line, task_table_header


@click.group("tasks")
def tasks_group() -> None:
    """Create and manage transcode tasks on the backend.

    Examples:

        # List all tasks
        ffweb tasks list

        # Queue two files with a built-in preset
        ffweb tasks create /videos/a.mkv /videos/b.mkv -p builtin-h265-balanced

        # Retry a failed task
        ffweb tasks retry <task-id>
    """


@tasks_group.command("list")
@click.option(
    "--status",
    "-s",
    type=click.Choice([s.value for s in TaskStatus] + ["all"]),
    default="all",
    help="Filter by task status.",
)
@json_option
@click.pass_context
def list_tasks(ctx: click.Context, status: str, json_output: bool) -> None:
    """List tasks known to the backend."""
    try:
        with make_client(ctx) as client:
            tasks = client.list_tasks()
    except FfwebError as e:
        fail(e, json_output)

    if status != "all":
        tasks = [t for t in tasks if t.status == TaskStatus(status)]

    if json_output:
        echo_json([dump_task(t) for t in tasks])
        return
    if not tasks:
        click.echo("No tasks found.")
        return

    click.echo(task_table_header())
    click.echo("-" * 100)
    for task in tasks:
        click.echo(format_task_line(task))


@tasks_group.command("show")
@click.argument("task_id")
@json_option
@click.pass_context
def show_task(ctx: click.Context, task_id: str, json_output: bool) -> None:
    """Show detailed information about a task."""
    try:
        with make_client(ctx) as client:
            task = client.get_task(task_id)
    except FfwebError as e:
        fail(e, json_output)

    if json_output:
        echo_json(dump_task(task))
        return

    click.echo(f"Task:     {task.id}")
    click.echo(f"Status:   {task.status.value}")
    click.echo(f"Progress: {task.progress:.1f}% (speed {task.speed}x, eta {task.eta}s)")
    click.echo(f"Source:   {task.source_file}")
    click.echo(f"Output:   {task.output_file}")
    if task.preset:
        click.echo(f"Preset:   {task.preset}")
    if task.actual_command:
        click.echo(f"Command:  {task.actual_command}")
    if task.error:
        click.echo(click.style(f"Error:    {task.error}", fg="red"))


@tasks_group.command("create")
@click.argument("source_files", nargs=-1, required=True)
@click.option("--preset", "-p", "preset_id", help="Preset ID to use.")
@config_file_option
@json_option
@click.pass_context
def create_tasks(
    ctx: click.Context,
    source_files: tuple[str, ...],
    preset_id: str | None,
    config_file: Path | None,
    json_output: bool,
) -> None:
    """Create one pending task per SOURCE_FILE."""
    try:
        config = read_transcode_config(config_file) if config_file else None
        with make_client(ctx) as client:
            tasks = client.create_tasks(list(source_files), config, preset_id)
    except FfwebError as e:
        fail(e, json_output)

    if json_output:
        echo_json([dump_task(t) for t in tasks])
        return
    for task in tasks:
        click.echo(f"Created {task.id}: {task.source_file} -> {task.output_file}")


def _task_action_command(
    name: str, help_text: str, call: Callable[[ApiClient, str], Task | None]
) -> click.Command:
    """Build a `tasks <name> TASK_ID` command around one client call."""

    @click.argument("task_id")
    @json_option
    @click.pass_context
    def command(ctx: click.Context, task_id: str, json_output: bool) -> None:
        try:
            with make_client(ctx) as client:
                task = call(client, task_id)
        except FfwebError as e:
            fail(e, json_output)

        if json_output:
            echo_json(dump_task(task) if task else {"status": "deleted", "id": task_id})
        elif task is None:
            click.echo(f"Deleted {task_id}")
        else:
            click.echo(f"{task.id}: {task.status.value}")

    return click.command(name, help=help_text)(command)


for _name, _help, _call in (
    ("cancel", "Cancel a running task.", ApiClient.cancel_task),
    ("pause", "Pause a pending task.", ApiClient.pause_task),
    ("resume", "Return a paused task to the queue.", ApiClient.resume_task),
    ("retry", "Queue a copy of a finished task.", ApiClient.retry_task),
    ("delete", "Delete a finished task.", ApiClient.delete_task),
):
    tasks_group.add_command(_task_action_command(_name, _help, _call))
