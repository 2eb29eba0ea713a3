"""Configuration for ffweb.

Usage:
    from ffweb.config import get_config

    config = get_config()
    print(config.client.base_url, config.telemetry_url)
"""

from ffweb.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from ffweb.config.env import EnvReader
from ffweb.config.loader import (
    DEFAULT_CONFIG_FILE,
    get_config,
    get_default_config_path,
    load_config_file,
)
from ffweb.config.models import (
    ClientConfig,
    FfwebConfig,
    LoggingConfig,
    ServerConfig,
    SettingsConfig,
    TelemetryConfig,
)

__all__ = [
    # Models
    "ClientConfig",
    "FfwebConfig",
    "LoggingConfig",
    "ServerConfig",
    "SettingsConfig",
    "TelemetryConfig",
    # Loading
    "ConfigBuilder",
    "ConfigSource",
    "DEFAULT_CONFIG_FILE",
    "EnvReader",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    "source_from_env",
    "source_from_file",
]
