"""Configuration data models for ffweb.

Each section validates itself in ``__post_init__``; FfwebConfig aggregates
the sections. Values are layered by ConfigBuilder (see builder.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlsplit

from ffweb.domain import Settings
from ffweb.telemetry import (
    BASE_DELAY_MS,
    MAX_DELAY_MS,
    MAX_RECONNECT_ATTEMPTS,
    progress_url,
)


@dataclass
class ServerConfig:
    """Configuration for the development backend (`ffweb serve`)."""

    bind: str = "127.0.0.1"
    """Network address to bind to. Default localhost."""

    port: int = 8080
    """Port number for the HTTP server."""

    simulate: bool = False
    """Run the progress simulator so tasks advance without FFmpeg."""

    simulator_interval: float = 1.0
    """Seconds between simulator ticks."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be 1-65535, got {self.port}")
        if self.simulator_interval <= 0:
            raise ValueError(
                f"simulator_interval must be positive, got {self.simulator_interval}"
            )


@dataclass
class ClientConfig:
    """Configuration for talking to a backend."""

    base_url: str = "http://localhost:8080"
    """Backend origin; the API lives under ``/api``."""

    timeout: float = 10.0
    """Request timeout in seconds."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if urlsplit(self.base_url).scheme not in ("http", "https"):
            raise ValueError(f"base_url must be http(s), got {self.base_url}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")


@dataclass
class TelemetryConfig:
    """Configuration for the live telemetry channel."""

    # Origin of the progress socket; None means the client base_url
    origin: str | None = None

    max_reconnect_attempts: int = MAX_RECONNECT_ATTEMPTS
    base_delay_ms: int = BASE_DELAY_MS
    max_delay_ms: int = MAX_DELAY_MS

    # WebSocket ping interval in seconds (None = transport default)
    heartbeat: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_reconnect_attempts < 0:
            raise ValueError(
                "max_reconnect_attempts must be >= 0, "
                f"got {self.max_reconnect_attempts}"
            )
        if self.base_delay_ms <= 0:
            raise ValueError(
                f"base_delay_ms must be positive, got {self.base_delay_ms}"
            )
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError(
                f"max_delay_ms ({self.max_delay_ms}) must be >= "
                f"base_delay_ms ({self.base_delay_ms})"
            )


@dataclass
class SettingsConfig:
    """Initial backend settings for `ffweb serve`."""

    default_output_path: str = "/output"
    enable_gpu: bool = True
    max_concurrent_tasks: int = 3
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_concurrent_tasks < 1:
            raise ValueError(
                f"max_concurrent_tasks must be >= 1, got {self.max_concurrent_tasks}"
            )

    def to_settings(self) -> Settings:
        """Convert to the domain Settings value."""
        return Settings(
            default_output_path=self.default_output_path,
            enable_gpu=self.enable_gpu,
            max_concurrent_tasks=self.max_concurrent_tasks,
            ffmpeg_path=self.ffmpeg_path,
            ffprobe_path=self.ffprobe_path,
        )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class FfwebConfig:
    """Main configuration container for ffweb.

    Aggregates all configuration sections.
    """

    server: ServerConfig = field(default_factory=ServerConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    settings: SettingsConfig = field(default_factory=SettingsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def telemetry_url(self) -> str:
        """WebSocket URL of the progress channel."""
        return progress_url(self.telemetry.origin or self.client.base_url)
