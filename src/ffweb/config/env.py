"""Typed access to FFWEB_* environment variables.

EnvReader takes an optional mapping so tests can inject an environment
instead of patching os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

ENV_PREFIX = "FFWEB_"

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})

T = TypeVar("T")


class EnvReader:
    """Read and convert environment variables.

    Unset variables return None. Set-but-unparseable numeric values are
    logged and also return None, so a lower-precedence source keeps its
    value.

    Example:
        reader = EnvReader({"FFWEB_SERVER_PORT": "9000"})
        reader.get_int("FFWEB_SERVER_PORT")  # 9000
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def _convert(self, var: str, convert: Callable[[str], T], kind: str) -> T | None:
        value = self._env.get(var)
        if value is None:
            return None
        try:
            return convert(value)
        except ValueError:
            logger.warning("Invalid %s value for %s: %s", kind, var, value)
            return None

    def get_str(self, var: str) -> str | None:
        """Return the raw value, or None if unset or empty."""
        return self._env.get(var) or None

    def get_int(self, var: str) -> int | None:
        """Return the value parsed as an integer."""
        return self._convert(var, int, "integer")

    def get_float(self, var: str) -> float | None:
        """Return the value parsed as a float."""
        return self._convert(var, float, "float")

    def get_bool(self, var: str) -> bool | None:
        """Return True for true/1/yes/on (any case), False for anything else."""
        value = self._env.get(var)
        if value is None:
            return None
        return value.strip().lower() in _TRUE_VALUES

    def get_path(self, var: str) -> Path | None:
        """Return the value as a user-expanded Path."""
        value = self.get_str(var)
        return Path(value).expanduser() if value else None
