"""Tests for domain models and enums."""

import pytest

from ffweb.domain import (
    ConfigMode,
    HdrMode,
    ProgressUpdate,
    Settings,
    TaskStatus,
    TranscodeConfig,
    VideoConfig,
)


class TestVideoConfig:
    """Tests for VideoConfig validation."""

    @pytest.mark.parametrize("crf", [0, 23, 51])
    def test_valid_crf(self, crf):
        assert VideoConfig(crf=crf).crf == crf

    @pytest.mark.parametrize("crf", [-1, 52])
    def test_invalid_crf(self, crf):
        with pytest.raises(ValueError, match="crf must be between 0 and 51"):
            VideoConfig(crf=crf)

    def test_preserve_hdr(self):
        assert VideoConfig(hdr_mode=frozenset({HdrMode.AUTO})).preserve_hdr
        assert not VideoConfig().preserve_hdr


class TestTranscodeConfig:
    """Tests for TranscodeConfig.uses_custom_command."""

    def test_advanced_with_command(self):
        config = TranscodeConfig(mode=ConfigMode.ADVANCED, custom_command="-i x")
        assert config.uses_custom_command

    def test_advanced_with_blank_command(self):
        config = TranscodeConfig(mode=ConfigMode.ADVANCED, custom_command="  ")
        assert not config.uses_custom_command

    def test_simple_ignores_command(self):
        assert not TranscodeConfig(custom_command="-i x").uses_custom_command


class TestTaskStatus:
    """Tests for TaskStatus.is_terminal."""

    @pytest.mark.parametrize(
        "status,terminal",
        [
            (TaskStatus.PENDING, False),
            (TaskStatus.PAUSED, False),
            (TaskStatus.RUNNING, False),
            (TaskStatus.COMPLETED, True),
            (TaskStatus.FAILED, True),
            (TaskStatus.CANCELLED, True),
        ],
    )
    def test_is_terminal(self, status, terminal):
        assert status.is_terminal is terminal


class TestProgressUpdate:
    """Tests for ProgressUpdate.changes()."""

    def test_empty_update_has_no_changes(self):
        assert ProgressUpdate(task_id="t1").changes() == {}

    def test_changes_include_only_present_fields(self):
        update = ProgressUpdate(task_id="t1", status=TaskStatus.RUNNING, speed=1.5)
        assert update.changes() == {"status": TaskStatus.RUNNING, "speed": 1.5}


class TestSettings:
    """Tests for Settings validation."""

    def test_max_concurrent_tasks_must_be_positive(self):
        with pytest.raises(ValueError, match="max_concurrent_tasks"):
            Settings(max_concurrent_tasks=0)
