"""Unified CLI output formatting for JSON and human-readable output."""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import click

from ffweb.domain import Preset, Task, TaskStatus
from ffweb.exceptions import (
    ApiConnectionError,
    ApiError,
    BuiltinPresetError,
    ConfigError,
    FfwebError,
    InvalidTransitionError,
    NotFoundError,
    SchemaError,
)

from .exit_codes import ExitCode

# Map TaskStatus to terminal color names (for click.style)
TASK_STATUS_COLORS: dict[TaskStatus, str] = {
    TaskStatus.PENDING: "yellow",
    TaskStatus.PAUSED: "cyan",
    TaskStatus.RUNNING: "blue",
    TaskStatus.COMPLETED: "green",
    TaskStatus.FAILED: "red",
    TaskStatus.CANCELLED: "bright_black",
}

# Backend error codes that have a dedicated exit code
_API_CODE_EXITS: dict[str, ExitCode] = {
    "NOT_FOUND": ExitCode.NOT_FOUND,
    "VALIDATION_FAILED": ExitCode.VALIDATION_ERROR,
    "INVALID_JSON": ExitCode.VALIDATION_ERROR,
    "INVALID_TRANSITION": ExitCode.INVALID_TRANSITION,
    "BUILTIN_PRESET": ExitCode.BUILTIN_PRESET,
}


def error_exit(
    message: str,
    code: ExitCode | int,
    json_output: bool = False,
) -> NoReturn:
    """Exit with a formatted error message.

    Args:
        message: Error message to display.
        code: Exit code to use (ExitCode enum or int).
        json_output: Whether to format output as JSON.
    """
    code_name = code.name if isinstance(code, ExitCode) else "UNKNOWN_ERROR"
    if json_output:
        click.echo(
            json.dumps(
                {"status": "failed", "error": {"code": code_name, "message": message}}
            ),
            err=True,
        )
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


def exit_code_for(error: FfwebError) -> ExitCode:
    """Pick the exit code for a package exception."""
    if isinstance(error, ApiError):
        return _API_CODE_EXITS.get(error.code or "", ExitCode.API_ERROR)
    if isinstance(error, ApiConnectionError):
        return ExitCode.CONNECTION_ERROR
    if isinstance(error, ConfigError):
        return ExitCode.CONFIG_ERROR
    if isinstance(error, SchemaError):
        return ExitCode.VALIDATION_ERROR
    if isinstance(error, NotFoundError):
        return ExitCode.NOT_FOUND
    if isinstance(error, InvalidTransitionError):
        return ExitCode.INVALID_TRANSITION
    if isinstance(error, BuiltinPresetError):
        return ExitCode.BUILTIN_PRESET
    return ExitCode.GENERAL_ERROR


def fail(error: FfwebError, json_output: bool = False) -> NoReturn:
    """error_exit() for a package exception."""
    message = error.message if isinstance(error, ApiError) else str(error)
    error_exit(message, exit_code_for(error), json_output)


def echo_json(data: Any) -> None:
    """Print ``data`` as indented JSON."""
    click.echo(json.dumps(data, indent=2))


def get_status_color(status: TaskStatus) -> str:
    """Get the terminal color for a task status."""
    return TASK_STATUS_COLORS.get(status, "white")


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else "..." + text[-(width - 3) :]


def format_task_line(task: Task) -> str:
    """One table row for a task, with the status colored."""
    status = click.style(f"{task.status.value:<10}", fg=get_status_color(task.status))
    progress = f"{task.progress:.0f}%"
    return (
        f"{task.id[:8]:<10} {status} {progress:>5}  "
        f"{_truncate(task.source_file, 40):<40} -> {task.output_file}"
    )


def task_table_header() -> str:
    """Header matching format_task_line()."""
    return f"{'ID':<10} {'STATUS':<10} {'PROG':>5}  {'SOURCE':<40}    OUTPUT"


def format_preset_line(preset: Preset) -> str:
    """One table row for a preset."""
    marker = "*" if preset.is_builtin else " "
    return f"{marker} {preset.id:<24} {preset.name:<26} {preset.description}"
