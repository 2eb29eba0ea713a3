"""Pydantic models for the JSON wire format.

The backend contract uses camelCase field names; these models parse and
validate payloads and convert them to the frozen dataclasses in
ffweb.domain.models. Unknown fields are ignored so newer backends can add
fields without breaking older clients.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ffweb.exceptions import SchemaError

from .enums import (
    AudioCodec,
    ConfigMode,
    EncoderType,
    HardwareAccel,
    HdrMode,
    OutputPathType,
    TaskStatus,
)
from .models import (
    CRF_MAX,
    CRF_MIN,
    AudioConfig,
    OutputConfig,
    Preset,
    ProgressUpdate,
    Settings,
    Task,
    TranscodeConfig,
    VideoConfig,
)


class WireModel(BaseModel):
    """Base model: camelCase aliases, snake_case attribute access."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class VideoConfigModel(WireModel):
    """Pydantic model for the ``video`` block."""

    crf: int | None = Field(default=None, ge=CRF_MIN, le=CRF_MAX)
    preset: str | None = None
    hdr_mode: list[HdrMode] = Field(default_factory=list)


class AudioConfigModel(WireModel):
    """Pydantic model for the ``audio`` block."""

    codec: AudioCodec = AudioCodec.COPY
    bitrate: str | None = None
    channels: int | None = Field(default=None, ge=0)


class OutputConfigModel(WireModel):
    """Pydantic model for the ``output`` block."""

    container: str = "mp4"
    suffix: str = "_transcoded"
    path_type: OutputPathType = OutputPathType.DEFAULT
    custom_path: str | None = None


class TranscodeConfigModel(WireModel):
    """Pydantic model for TranscodeConfig."""

    mode: ConfigMode = ConfigMode.SIMPLE
    encoder: EncoderType = EncoderType.H265
    hardware_accel: HardwareAccel = HardwareAccel.CPU
    video: VideoConfigModel = Field(default_factory=VideoConfigModel)
    audio: AudioConfigModel = Field(default_factory=AudioConfigModel)
    output: OutputConfigModel = Field(default_factory=OutputConfigModel)
    extra_params: str | None = None
    custom_command: str | None = None

    def to_domain(self) -> TranscodeConfig:
        """Convert to the frozen domain dataclass."""
        return TranscodeConfig(
            mode=self.mode,
            encoder=self.encoder,
            hardware_accel=self.hardware_accel,
            video=VideoConfig(
                crf=self.video.crf,
                preset=self.video.preset or None,
                hdr_mode=frozenset(self.video.hdr_mode),
            ),
            audio=AudioConfig(
                codec=self.audio.codec,
                bitrate=self.audio.bitrate or None,
                # 0 means "keep source layout" in the original backend
                channels=self.audio.channels or None,
            ),
            output=OutputConfig(
                container=self.output.container,
                suffix=self.output.suffix,
                path_type=self.output.path_type,
                custom_path=self.output.custom_path or None,
            ),
            extra_params=self.extra_params or None,
            custom_command=self.custom_command or None,
        )


class PresetModel(WireModel):
    """Pydantic model for Preset."""

    id: str
    name: str
    description: str = ""
    config: TranscodeConfigModel
    is_builtin: bool = False
    created_at: datetime | None = None

    def to_domain(self) -> Preset:
        """Convert to the frozen domain dataclass."""
        return Preset(
            id=self.id,
            name=self.name,
            description=self.description,
            config=self.config.to_domain(),
            is_builtin=self.is_builtin,
            created_at=self.created_at,
        )


class TaskModel(WireModel):
    """Pydantic model for Task."""

    id: str
    source_file: str
    output_file: str = ""
    status: TaskStatus = TaskStatus.PENDING
    progress: float = Field(default=0.0, ge=0, le=100)
    speed: float = 0.0
    eta: int = 0
    error: str | None = None
    config: TranscodeConfigModel = Field(default_factory=TranscodeConfigModel)
    actual_command: str | None = None
    preset: str | None = None
    source_file_size: int | None = None
    output_file_size: int | None = None
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def to_domain(self) -> Task:
        """Convert to the frozen domain dataclass."""
        return Task(
            id=self.id,
            source_file=self.source_file,
            output_file=self.output_file,
            config=self.config.to_domain(),
            status=self.status,
            progress=self.progress,
            speed=self.speed,
            eta=self.eta,
            error=self.error or None,
            actual_command=self.actual_command or None,
            preset=self.preset or None,
            source_file_size=self.source_file_size,
            output_file_size=self.output_file_size,
            created_at=self.created_at,
            started_at=self.started_at,
            completed_at=self.completed_at,
        )


class ProgressUpdateModel(WireModel):
    """Pydantic model for a telemetry ProgressUpdate frame."""

    task_id: str
    status: TaskStatus | None = None
    progress: float | None = Field(default=None, ge=0, le=100)
    speed: float | None = None
    eta: int | None = None
    error: str | None = None

    def to_domain(self) -> ProgressUpdate:
        """Convert to the frozen domain dataclass."""
        return ProgressUpdate(
            task_id=self.task_id,
            status=self.status,
            progress=self.progress,
            speed=self.speed,
            eta=self.eta,
            error=self.error,
        )


class SettingsModel(WireModel):
    """Pydantic model for backend Settings."""

    default_output_path: str = "/output"
    enable_gpu: bool = Field(default=True, alias="enableGPU")
    max_concurrent_tasks: int = Field(default=3, ge=1)
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"

    def to_domain(self) -> Settings:
        """Convert to the frozen domain dataclass."""
        return Settings(
            default_output_path=self.default_output_path,
            enable_gpu=self.enable_gpu,
            max_concurrent_tasks=self.max_concurrent_tasks,
            ffmpeg_path=self.ffmpeg_path,
            ffprobe_path=self.ffprobe_path,
        )


class CreateTasksRequest(WireModel):
    """Body of POST /tasks."""

    source_files: list[str] = Field(min_length=1)
    preset: str | None = None
    config: TranscodeConfigModel | None = None


class PresetRequest(WireModel):
    """Body of POST /presets and PUT /presets/{id}."""

    name: str = Field(min_length=1)
    description: str = ""
    config: TranscodeConfigModel


class PreviewRequest(WireModel):
    """Body of POST /preview-command."""

    config: TranscodeConfigModel
    source_file: str = "input.mp4"


def _validate(model: type[WireModel], data: Any, what: str) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SchemaError(
            f"Invalid {what}: {e.error_count()} error(s)",
            e.errors(include_url=False),
        ) from e


def parse_config(data: Any) -> TranscodeConfig:
    """Parse a TranscodeConfig payload.

    Raises:
        SchemaError: If the payload does not validate.
    """
    return _validate(TranscodeConfigModel, data, "transcode config").to_domain()


def parse_preset(data: Any) -> Preset:
    """Parse a Preset payload."""
    return _validate(PresetModel, data, "preset").to_domain()


def parse_task(data: Any) -> Task:
    """Parse a Task payload."""
    return _validate(TaskModel, data, "task").to_domain()


def parse_progress(data: Any) -> ProgressUpdate:
    """Parse a ProgressUpdate frame."""
    return _validate(ProgressUpdateModel, data, "progress update").to_domain()


def parse_settings(data: Any) -> Settings:
    """Parse a Settings payload."""
    return _validate(SettingsModel, data, "settings").to_domain()


def parse_request(model: type[WireModel], data: Any) -> Any:
    """Validate a request body against one of the request models."""
    return _validate(model, data, "request body")


def _config_model(config: TranscodeConfig) -> TranscodeConfigModel:
    return TranscodeConfigModel(
        mode=config.mode,
        encoder=config.encoder,
        hardware_accel=config.hardware_accel,
        video=VideoConfigModel(
            crf=config.video.crf,
            preset=config.video.preset,
            hdr_mode=sorted(config.video.hdr_mode, key=lambda m: m.value),
        ),
        audio=AudioConfigModel(
            codec=config.audio.codec,
            bitrate=config.audio.bitrate,
            channels=config.audio.channels,
        ),
        output=OutputConfigModel(
            container=config.output.container,
            suffix=config.output.suffix,
            path_type=config.output.path_type,
            custom_path=config.output.custom_path,
        ),
        extra_params=config.extra_params,
        custom_command=config.custom_command,
    )


def _dump(model: WireModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_config(config: TranscodeConfig) -> dict[str, Any]:
    """Serialize a TranscodeConfig to its camelCase JSON form."""
    return _dump(_config_model(config))


def dump_preset(preset: Preset) -> dict[str, Any]:
    """Serialize a Preset to its camelCase JSON form."""
    return _dump(
        PresetModel(
            id=preset.id,
            name=preset.name,
            description=preset.description,
            config=_config_model(preset.config),
            is_builtin=preset.is_builtin,
            created_at=preset.created_at,
        )
    )


def dump_task(task: Task) -> dict[str, Any]:
    """Serialize a Task to its camelCase JSON form."""
    return _dump(
        TaskModel(
            id=task.id,
            source_file=task.source_file,
            output_file=task.output_file,
            status=task.status,
            progress=task.progress,
            speed=task.speed,
            eta=task.eta,
            error=task.error,
            config=_config_model(task.config),
            actual_command=task.actual_command,
            preset=task.preset,
            source_file_size=task.source_file_size,
            output_file_size=task.output_file_size,
            created_at=task.created_at,
            started_at=task.started_at,
            completed_at=task.completed_at,
        )
    )


def dump_progress(update: ProgressUpdate) -> dict[str, Any]:
    """Serialize a ProgressUpdate, omitting absent fields."""
    return _dump(
        ProgressUpdateModel(
            task_id=update.task_id,
            status=update.status,
            progress=update.progress,
            speed=update.speed,
            eta=update.eta,
            error=update.error,
        )
    )


def dump_settings(settings: Settings) -> dict[str, Any]:
    """Serialize Settings to its camelCase JSON form."""
    return _dump(
        SettingsModel(
            default_output_path=settings.default_output_path,
            enable_gpu=settings.enable_gpu,
            max_concurrent_tasks=settings.max_concurrent_tasks,
            ffmpeg_path=settings.ffmpeg_path,
            ffprobe_path=settings.ffprobe_path,
        )
    )
