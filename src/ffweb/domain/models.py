"""Domain models for ffweb.

Frozen dataclasses describing transcode configurations, presets, tasks and
progress events. These carry no behavior beyond small derived properties;
synthesis lives in ffweb.synthesis and state changes in ffweb.tasks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .enums import (
    AudioCodec,
    ConfigMode,
    EncoderType,
    HardwareAccel,
    HdrMode,
    OutputPathType,
    TaskStatus,
)

# Quality knob bounds shared by x265, SVT-AV1, NVENC cq, QSV and AMF qp
CRF_MIN = 0
CRF_MAX = 51


@dataclass(frozen=True)
class VideoConfig:
    """Video encoding knobs.

    ``crf`` is passed through unchanged; only the flag name depends on the
    hardware path. ``hdr_mode`` containing AUTO requests HDR preservation.
    """

    crf: int | None = None
    preset: str | None = None
    hdr_mode: frozenset[HdrMode] = frozenset()

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.crf is not None and not CRF_MIN <= self.crf <= CRF_MAX:
            raise ValueError(
                f"crf must be between {CRF_MIN} and {CRF_MAX}, got {self.crf}"
            )

    @property
    def preserve_hdr(self) -> bool:
        """True if HDR metadata should be preserved."""
        return HdrMode.AUTO in self.hdr_mode


@dataclass(frozen=True)
class AudioConfig:
    """Audio encoding knobs. Bitrate and channels are ignored for COPY."""

    codec: AudioCodec = AudioCodec.COPY
    bitrate: str | None = None  # e.g. "192k"
    channels: int | None = None


@dataclass(frozen=True)
class OutputConfig:
    """Output naming and placement policy."""

    container: str = "mp4"
    suffix: str = "_transcoded"
    path_type: OutputPathType = OutputPathType.DEFAULT
    custom_path: str | None = None


@dataclass(frozen=True)
class TranscodeConfig:
    """Complete description of a desired transcode."""

    encoder: EncoderType = EncoderType.H265
    hardware_accel: HardwareAccel = HardwareAccel.CPU
    video: VideoConfig = field(default_factory=VideoConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    mode: ConfigMode = ConfigMode.SIMPLE
    extra_params: str | None = None
    custom_command: str | None = None

    @property
    def uses_custom_command(self) -> bool:
        """True if synthesis takes the advanced (custom command) branch."""
        return (
            self.mode == ConfigMode.ADVANCED
            and bool(self.custom_command)
            and bool(self.custom_command.strip())
        )


@dataclass(frozen=True)
class Preset:
    """Named, reusable TranscodeConfig."""

    id: str
    name: str
    config: TranscodeConfig
    description: str = ""
    is_builtin: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class Task:
    """One run of the synthesized command against one input file."""

    id: str
    source_file: str
    output_file: str
    config: TranscodeConfig
    status: TaskStatus = TaskStatus.PENDING
    progress: float = 0.0  # 0-100
    speed: float = 0.0  # x realtime
    eta: int = 0  # seconds
    error: str | None = None
    actual_command: str | None = None
    preset: str | None = None
    source_file_size: int | None = None  # bytes
    output_file_size: int | None = None  # bytes
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True)
class ProgressUpdate:
    """Partial task update delivered by the telemetry channel.

    Every field except ``task_id`` is optional; None means "unchanged",
    never "reset".
    """

    task_id: str
    status: TaskStatus | None = None
    progress: float | None = None
    speed: float | None = None
    eta: int | None = None
    error: str | None = None

    def changes(self) -> dict[str, object]:
        """Return the Task field values carried by this update."""
        candidates = {
            "status": self.status,
            "progress": self.progress,
            "speed": self.speed,
            "eta": self.eta,
            "error": self.error,
        }
        return {key: value for key, value in candidates.items() if value is not None}


@dataclass(frozen=True)
class Settings:
    """Global backend settings relevant to command synthesis."""

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
