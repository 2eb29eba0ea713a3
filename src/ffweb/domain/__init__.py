"""Domain models, enums and wire schemas for ffweb.

- Domain models: TranscodeConfig (+ Video/Audio/OutputConfig), Preset, Task,
  ProgressUpdate, Settings
- Domain enums: ConfigMode, EncoderType, HardwareAccel, AudioCodec,
  OutputPathType, HdrMode, TaskStatus, TaskAction
- Wire helpers: parse_* / dump_* for the camelCase JSON contract

Usage:
    from ffweb.domain import TranscodeConfig, HardwareAccel
    from ffweb.domain import parse_config, dump_task
"""

from .enums import (
    AudioCodec,
    ConfigMode,
    EncoderType,
    HardwareAccel,
    HdrMode,
    OutputPathType,
    TaskAction,
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
from .schemas import (
    dump_config,
    dump_preset,
    dump_progress,
    dump_settings,
    dump_task,
    parse_config,
    parse_preset,
    parse_progress,
    parse_settings,
    parse_task,
)

__all__ = [
    # Models
    "AudioConfig",
    "OutputConfig",
    "Preset",
    "ProgressUpdate",
    "Settings",
    "Task",
    "TranscodeConfig",
    "VideoConfig",
    "CRF_MIN",
    "CRF_MAX",
    # Enums
    "AudioCodec",
    "ConfigMode",
    "EncoderType",
    "HardwareAccel",
    "HdrMode",
    "OutputPathType",
    "TaskAction",
    "TaskStatus",
    # Wire helpers
    "dump_config",
    "dump_preset",
    "dump_progress",
    "dump_settings",
    "dump_task",
    "parse_config",
    "parse_preset",
    "parse_progress",
    "parse_settings",
    "parse_task",
]
