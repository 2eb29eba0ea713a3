"""Exit codes for ffweb CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, input)
    20-29: Lookup errors
    30-39: Connection errors
    40-49: Backend/operation errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for ffweb CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    CONFIG_ERROR = 11
    VALIDATION_ERROR = 12

    # Lookup errors (20-29)
    NOT_FOUND = 20

    # Connection errors (30-39)
    CONNECTION_ERROR = 30
    TELEMETRY_LOST = 31

    # Backend/operation errors (40-49)
    API_ERROR = 40
    INVALID_TRANSITION = 41
    BUILTIN_PRESET = 42
