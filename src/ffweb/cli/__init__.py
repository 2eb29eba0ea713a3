"""CLI module for ffweb."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from ffweb.config import ConfigSource, get_config
from ffweb.exceptions import ConfigError
from ffweb.logging import configure_logging

from .exit_codes import ExitCode
from .output import error_exit

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="ffweb")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.ffweb/config.toml or $FFWEB_CONFIG_PATH).",
)
@click.option(
    "--api-url",
    default=None,
    help="Backend origin, e.g. http://localhost:8080.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    api_url: str | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """ffweb - Build FFmpeg transcode commands and manage transcode tasks."""
    ctx.ensure_object(dict)
    if "config" in ctx.obj:
        # Preloaded by the caller (tests, embedding)
        configure_logging(ctx.obj["config"].logging)
        return

    cli_source = ConfigSource(
        client_base_url=api_url,
        logging_level=log_level.lower() if log_level else None,
        logging_file=log_file,
        logging_format="json" if log_json else None,
    )
    try:
        config = get_config(config_path, cli=cli_source, strict=config_path is not None)
    except ConfigError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)

    ctx.obj["config"] = config
    configure_logging(config.logging)
    logger.debug(
        "ffweb starting: api_url=%s, log_level=%s",
        config.client.base_url,
        config.logging.level,
    )


# Defer import to avoid circular dependency
def _register_commands() -> None:
    from ffweb.cli.presets import presets_group
    from ffweb.cli.preview import preview_command
    from ffweb.cli.serve import serve_command
    from ffweb.cli.tasks import tasks_group
    from ffweb.cli.watch import watch_command

    main.add_command(preview_command)
    main.add_command(tasks_group)
    main.add_command(presets_group)
    main.add_command(watch_command)
    main.add_command(serve_command)


_register_commands()
