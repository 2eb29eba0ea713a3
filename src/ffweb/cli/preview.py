"""CLI command for previewing the synthesized FFmpeg command."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from ffweb.domain import TranscodeConfig
from ffweb.exceptions import FfwebError
from ffweb.presets import get_builtin_preset
from ffweb.synthesis import build_argv, command_as_string, synthesize

from .common import (
    config_file_option,
    get_config,
    json_option,
    make_client,
    read_transcode_config,
)
from .output import echo_json, fail

logger = logging.getLogger(__name__)


def _resolve_transcode_config(
    ctx: click.Context, config_file: Path | None, preset_id: str | None
) -> TranscodeConfig:
    if config_file is not None:
        return read_transcode_config(config_file)
    if preset_id is not None:
        preset = get_builtin_preset(preset_id)
        if preset is None:
            # User presets live on the backend
            with make_client(ctx) as client:
                preset = client.get_preset(preset_id)
        return preset.config
    return TranscodeConfig()


@click.command("preview")
@click.argument("input_path", default="input.mp4", metavar="[INPUT]")
@config_file_option
@click.option("--preset", "-p", "preset_id", help="Preset ID to preview.")
@click.option(
    "--output-dir",
    help="Default output directory (default: settings.default_output_path).",
)
@click.option(
    "--hdr-transfer",
    type=click.Choice(["smpte2084", "arib-std-b67"]),
    default=None,
    help="Probed transfer characteristic of an HDR source.",
)
@click.option(
    "--sdr",
    "source_is_sdr",
    is_flag=True,
    help="Source is known to be SDR; omit HDR preservation flags.",
)
@click.option(
    "--argv",
    "as_argv",
    is_flag=True,
    help="Print the process argument vector instead of the preview string.",
)
@click.option(
    "--remote",
    is_flag=True,
    help="Ask the backend to render the preview (POST /preview-command).",
)
@json_option
@click.pass_context
def preview_command(
    ctx: click.Context,
    input_path: str,
    config_file: Path | None,
    preset_id: str | None,
    output_dir: str | None,
    hdr_transfer: str | None,
    source_is_sdr: bool,
    as_argv: bool,
    remote: bool,
    json_output: bool,
) -> None:
    """Show the FFmpeg command a config produces for INPUT.

    Examples:

        # Default config
        ffweb preview /videos/a.mkv

        # Built-in preset with a probed PQ source
        ffweb preview /videos/a.mkv -p builtin-av1-hq --hdr-transfer smpte2084

        # Let the backend render it
        ffweb preview /videos/a.mkv -c config.json --remote
    """
    if remote:
        # The backend renders with its own settings and no probe results
        local_only = [
            name
            for name, given in (
                ("--output-dir", output_dir is not None),
                ("--hdr-transfer", hdr_transfer is not None),
                ("--sdr", source_is_sdr),
                ("--argv", as_argv),
            )
            if given
        ]
        if local_only:
            raise click.UsageError(
                f"{', '.join(local_only)} cannot be combined with --remote"
            )

    try:
        config = _resolve_transcode_config(ctx, config_file, preset_id)
        default_dir = output_dir or get_config(ctx).settings.default_output_path

        if remote:
            with make_client(ctx) as client:
                command = client.preview_command(config, input_path)
        else:
            kwargs = {
                "source_is_hdr": False if source_is_sdr else None,
                "source_transfer": hdr_transfer,
            }
            tokens = synthesize(config, input_path, default_dir, **kwargs)
            command = command_as_string(tokens)
            if as_argv:
                tokens = build_argv(config, input_path, default_dir, **kwargs)
    except FfwebError as e:
        fail(e, json_output)

    if as_argv:
        if json_output:
            echo_json({"argv": tokens})
        else:
            for token in tokens:
                click.echo(token)
        return

    if json_output:
        echo_json({"command": command})
    else:
        click.echo(command)
