"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed as a ConfigSource)
2. Environment variables (FFWEB_*)
3. Config file (~/.ffweb/config.toml)
4. Default values

Environment variables:
- FFWEB_CONFIG_PATH: Path to config file (overrides default location)
- FFWEB_API_URL / FFWEB_API_TIMEOUT: Backend origin and request timeout
- FFWEB_TELEMETRY_ORIGIN: Origin of the progress socket, if not the API URL
- FFWEB_SERVER_BIND / FFWEB_SERVER_PORT / FFWEB_SIMULATE: `ffweb serve`
- FFWEB_DEFAULT_OUTPUT_PATH, FFWEB_MAX_CONCURRENT_TASKS, FFWEB_ENABLE_GPU,
  FFWEB_FFMPEG_PATH, FFWEB_FFPROBE_PATH: initial backend settings
- FFWEB_LOG_LEVEL / FFWEB_LOG_FILE / FFWEB_LOG_FORMAT: logging
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from ffweb.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from ffweb.config.env import EnvReader
from ffweb.config.models import FfwebConfig
from ffweb.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".ffweb"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the config file path, honouring FFWEB_CONFIG_PATH."""
    reader = env_reader or EnvReader()
    return reader.get_path("FFWEB_CONFIG_PATH") or DEFAULT_CONFIG_FILE


def load_config_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file.
        strict: If True, raise ConfigError when the file cannot be read or
            parsed. If False (default), log a warning and return {}.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be loaded.
    """
    if not path.exists():
        logger.debug("No config file at %s", path)
        return {}

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigError(f"Cannot load config file {path}: {e}") from e
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}


def get_config(
    config_path: Path | None = None,
    cli: ConfigSource | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> FfwebConfig:
    """Get ffweb configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides FFWEB_CONFIG_PATH).
        cli: Values from command-line options (highest precedence).
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise on unreadable config files.

    Returns:
        FfwebConfig with merged configuration.

    Raises:
        ConfigError: If the merged values are invalid, or when strict=True
            and the config file cannot be loaded.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    file_config = load_config_file(path, strict=strict)

    # Build with precedence: file < env < cli
    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    if cli is not None:
        builder.apply(cli)

    try:
        return builder.build()
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
