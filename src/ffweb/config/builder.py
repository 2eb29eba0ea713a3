"""Configuration builder with explicit layering.

Each source (TOML file, environment, CLI) is first turned into a flat
ConfigSource whose None fields mean "not specified". ConfigBuilder applies
sources in increasing precedence and builds FfwebConfig, filling anything
still unset with the section defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from ffweb.config.env import EnvReader
from ffweb.config.models import (
    ClientConfig,
    FfwebConfig,
    LoggingConfig,
    ServerConfig,
    SettingsConfig,
    TelemetryConfig,
)

# ConfigSource field prefix -> (section class, FfwebConfig attribute)
_SECTIONS: dict[str, tuple[type, str]] = {
    "server_": (ServerConfig, "server"),
    "client_": (ClientConfig, "client"),
    "telemetry_": (TelemetryConfig, "telemetry"),
    "settings_": (SettingsConfig, "settings"),
    "logging_": (LoggingConfig, "logging"),
}


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    Field names are ``<section>_<field>`` for the matching FfwebConfig
    section. None values never override lower-precedence sources.
    """

    # Server
    server_bind: str | None = None
    server_port: int | None = None
    server_simulate: bool | None = None
    server_simulator_interval: float | None = None

    # Client
    client_base_url: str | None = None
    client_timeout: float | None = None

    # Telemetry
    telemetry_origin: str | None = None
    telemetry_max_reconnect_attempts: int | None = None
    telemetry_base_delay_ms: int | None = None
    telemetry_max_delay_ms: int | None = None
    telemetry_heartbeat: float | None = None

    # Backend settings
    settings_default_output_path: str | None = None
    settings_enable_gpu: bool | None = None
    settings_max_concurrent_tasks: int | None = None
    settings_ffmpeg_path: str | None = None
    settings_ffprobe_path: str | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds FfwebConfig by layering ConfigSources with precedence.

    Later sources override earlier ones (for non-None values).

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply a source; its non-None values override existing values."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def build(self) -> FfwebConfig:
        """Build FfwebConfig with defaults for unset values.

        Raises:
            ValueError: If a section rejects the layered values.
        """
        sections: dict[str, Any] = {}
        for prefix, (section_cls, attr) in _SECTIONS.items():
            kwargs = {
                key[len(prefix) :]: value
                for key, value in self._values.items()
                if key.startswith(prefix)
            }
            sections[attr] = section_cls(**kwargs)
        return FfwebConfig(**sections)


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Unknown sections and keys are ignored.

    Args:
        file_config: Parsed configuration dictionary.

    Returns:
        ConfigSource with values from the config file.
    """
    known = {f.name for f in fields(ConfigSource)}
    values: dict[str, Any] = {}
    for prefix in _SECTIONS:
        section = file_config.get(prefix[:-1], {})
        if not isinstance(section, dict):
            continue
        for key, value in section.items():
            name = prefix + key
            if name in known:
                values[name] = value

    if values.get("logging_file"):
        values["logging_file"] = Path(values["logging_file"]).expanduser()
    return ConfigSource(**values)


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from FFWEB_* environment variables.

    Args:
        reader: EnvReader instance for reading environment variables.

    Returns:
        ConfigSource with values from environment variables.
    """
    return ConfigSource(
        # Server
        server_bind=reader.get_str("FFWEB_SERVER_BIND"),
        server_port=reader.get_int("FFWEB_SERVER_PORT"),
        server_simulate=reader.get_bool("FFWEB_SIMULATE"),
        # Client
        client_base_url=reader.get_str("FFWEB_API_URL"),
        client_timeout=reader.get_float("FFWEB_API_TIMEOUT"),
        # Telemetry
        telemetry_origin=reader.get_str("FFWEB_TELEMETRY_ORIGIN"),
        telemetry_max_reconnect_attempts=reader.get_int(
            "FFWEB_TELEMETRY_MAX_RECONNECT_ATTEMPTS"
        ),
        # Backend settings
        settings_default_output_path=reader.get_str("FFWEB_DEFAULT_OUTPUT_PATH"),
        settings_enable_gpu=reader.get_bool("FFWEB_ENABLE_GPU"),
        settings_max_concurrent_tasks=reader.get_int("FFWEB_MAX_CONCURRENT_TASKS"),
        settings_ffmpeg_path=reader.get_str("FFWEB_FFMPEG_PATH"),
        settings_ffprobe_path=reader.get_str("FFWEB_FFPROBE_PATH"),
        # Logging
        logging_level=reader.get_str("FFWEB_LOG_LEVEL"),
        logging_file=reader.get_path("FFWEB_LOG_FILE"),
        logging_format=reader.get_str("FFWEB_LOG_FORMAT"),
    )
