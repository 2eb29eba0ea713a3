"""Helpers shared by CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import click

from ffweb.client import ApiClient
from ffweb.config import FfwebConfig
from ffweb.domain import TranscodeConfig, parse_config
from ffweb.exceptions import SchemaError

json_option = click.option(
    "--json", "json_output", is_flag=True, help="Output in JSON format."
)

config_file_option = click.option(
    "--config-file",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file holding a transcode config (camelCase wire format).",
)


def get_config(ctx: click.Context) -> FfwebConfig:
    """Return the FfwebConfig loaded by the main group."""
    return ctx.obj["config"]


def make_client(ctx: click.Context) -> ApiClient:
    """Create an ApiClient for the configured backend.

    Tests may pre-populate ``ctx.obj["client"]`` with a client.
    """
    if ctx.obj.get("client") is not None:
        return ctx.obj["client"]
    config = get_config(ctx)
    return ApiClient(config.client.base_url, timeout=config.client.timeout)


def read_transcode_config(path: Path) -> TranscodeConfig:
    """Load a TranscodeConfig from a JSON file.

    Raises:
        SchemaError: If the file is not valid JSON or fails validation.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SchemaError(f"{path} is not valid JSON: {e.msg}") from e
    return parse_config(data)
