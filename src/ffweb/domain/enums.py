"""Domain enums for ffweb.

Values match the lowercase strings used on the wire, so ``Enum(value)``
round-trips JSON payloads directly.
"""

from enum import Enum


class ConfigMode(Enum):
    """Which synthesis branch a TranscodeConfig uses."""

    SIMPLE = "simple"  # Built from encoder/hardware/video/audio fields
    ADVANCED = "advanced"  # User-supplied customCommand with placeholders


class EncoderType(Enum):
    """Target codec family (simple mode only)."""

    H265 = "h265"
    AV1 = "av1"


class HardwareAccel(Enum):
    """Encoder implementation / hardware path."""

    CPU = "cpu"
    NVIDIA = "nvidia"
    INTEL = "intel"
    AMD = "amd"


class AudioCodec(Enum):
    """Audio codec selection. COPY passes the source streams through."""

    COPY = "copy"
    AAC = "aac"
    OPUS = "opus"
    MP3 = "mp3"


class OutputPathType(Enum):
    """Where the transcoded file is written."""

    SOURCE = "source"  # Next to the input file
    CUSTOM = "custom"  # OutputConfig.custom_path
    DEFAULT = "default"  # <default dir>/<input parent dir name>
    OVERWRITE = "overwrite"  # Replace the input file (destructive)


class HdrMode(Enum):
    """HDR handling modes. AUTO preserves HDR metadata when present."""

    AUTO = "auto"


class TaskStatus(Enum):
    """Lifecycle status of a transcode task.

    pending -> running -> {completed, failed, cancelled}, pending <-> paused.
    """

    PENDING = "pending"
    PAUSED = "paused"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """True for statuses that accept only delete and retry."""
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.CANCELLED}
)


class TaskAction(Enum):
    """Actions that move a task between statuses."""

    START = "start"  # Backend-driven
    PAUSE = "pause"
    RESUME = "resume"
    CANCEL = "cancel"
    FAIL = "fail"  # Backend-driven (encoder failure)
    COMPLETE = "complete"  # Backend-driven (100% reached)
    DELETE = "delete"
    RETRY = "retry"
