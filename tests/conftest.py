"""Shared test fixtures for ffweb."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from ffweb.domain import (
    AudioCodec,
    AudioConfig,
    EncoderType,
    HardwareAccel,
    OutputConfig,
    OutputPathType,
    Task,
    TaskStatus,
    TranscodeConfig,
    VideoConfig,
)


@pytest.fixture
def nvidia_config() -> TranscodeConfig:
    """H.265 on NVENC, stream-copied audio, written next to the source."""
    return TranscodeConfig(
        encoder=EncoderType.H265,
        hardware_accel=HardwareAccel.NVIDIA,
        video=VideoConfig(crf=23, preset="medium"),
        audio=AudioConfig(codec=AudioCodec.COPY),
        output=OutputConfig(
            container="mp4", suffix="_out", path_type=OutputPathType.SOURCE
        ),
    )


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """Factory for tasks with sensible defaults."""

    def _make(task_id: str = "task-1", **overrides: object) -> Task:
        values: dict[str, object] = {
            "id": task_id,
            "source_file": f"/videos/{task_id}.mkv",
            "output_file": f"/output/videos/{task_id}_transcoded.mp4",
            "config": TranscodeConfig(),
            "status": TaskStatus.PENDING,
        }
        values.update(overrides)
        return Task(**values)  # type: ignore[arg-type]

    return _make
