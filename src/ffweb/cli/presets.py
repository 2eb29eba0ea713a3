"""CLI commands for preset management."""

from __future__ import annotations

from pathlib import Path

import click

from ffweb.domain import dump_preset
from ffweb.exceptions import FfwebError
from ffweb.presets import BUILTIN_PRESETS

from .common import json_option, make_client, read_transcode_config
from .output import echo_json, fail, format_preset_line


@click.group("presets")
def presets_group() -> None:
    """List and manage transcode presets.

    Built-in presets (marked with *) are read-only.
    """


@presets_group.command("list")
@click.option(
    "--builtin",
    "builtin_only",
    is_flag=True,
    help="List the built-in catalogue without contacting the backend.",
)
@json_option
@click.pass_context
def list_presets(ctx: click.Context, builtin_only: bool, json_output: bool) -> None:
    """List presets, built-in first."""
    if builtin_only:
        presets = list(BUILTIN_PRESETS)
    else:
        try:
            with make_client(ctx) as client:
                presets = client.list_presets()
        except FfwebError as e:
            fail(e, json_output)

    if json_output:
        echo_json([dump_preset(p) for p in presets])
        return
    for preset in presets:
        click.echo(format_preset_line(preset))


@presets_group.command("show")
@click.argument("preset_id")
@click.pass_context
def show_preset(ctx: click.Context, preset_id: str) -> None:
    """Print a preset as JSON."""
    try:
        with make_client(ctx) as client:
            preset = client.get_preset(preset_id)
    except FfwebError as e:
        fail(e)
    echo_json(dump_preset(preset))


@presets_group.command("create")
@click.option("--name", "-n", required=True, help="Preset name.")
@click.option("--description", "-d", default="", help="Preset description.")
@click.option(
    "--config-file",
    "-c",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file holding the transcode config.",
)
@json_option
@click.pass_context
def create_preset(
    ctx: click.Context,
    name: str,
    description: str,
    config_file: Path,
    json_output: bool,
) -> None:
    """Create a user preset from a config file."""
    try:
        config = read_transcode_config(config_file)
        with make_client(ctx) as client:
            preset = client.create_preset(name, config, description)
    except FfwebError as e:
        fail(e, json_output)

    if json_output:
        echo_json(dump_preset(preset))
    else:
        click.echo(f"Created preset {preset.id} ({preset.name})")


@presets_group.command("delete")
@click.argument("preset_id")
@json_option
@click.pass_context
def delete_preset(ctx: click.Context, preset_id: str, json_output: bool) -> None:
    """Delete a user preset. Built-in presets cannot be deleted."""
    try:
        with make_client(ctx) as client:
            client.delete_preset(preset_id)
    except FfwebError as e:
        fail(e, json_output)

    if json_output:
        echo_json({"status": "deleted", "id": preset_id})
    else:
        click.echo(f"Deleted preset {preset_id}")
