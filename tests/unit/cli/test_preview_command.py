"""Tests for `ffweb preview`."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from ffweb.cli import main
from ffweb.cli.exit_codes import ExitCode
from ffweb.domain import dump_config


@pytest.fixture
def config_file(tmp_path: Path, nvidia_config) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(dump_config(nvidia_config)))
    return path


class TestPreviewCommand:
    """Tests for local previews."""

    def test_default_config(self, runner, make_obj):
        result = runner.invoke(
            main, ["preview", "/videos/movies/x.mp4"], obj=make_obj()
        )

        assert result.exit_code == 0, result.output
        assert result.output.strip() == (
            "ffmpeg -i /videos/movies/x.mp4 -map 0 -map_metadata 0 -c:v libx265 "
            "-c:a copy -c:s copy -c:t copy /output/movies/x_transcoded.mp4"
        )

    def test_config_file(self, runner, make_obj, config_file):
        result = runner.invoke(
            main, ["preview", "/videos/a.mkv", "-c", str(config_file)], obj=make_obj()
        )

        assert result.exit_code == 0, result.output
        assert result.output.startswith(
            "ffmpeg -hwaccel cuda -hwaccel_output_format cuda -i /videos/a.mkv"
        )
        assert result.output.strip().endswith("/videos/a_out.mp4")

    def test_output_dir_override(self, runner, make_obj):
        result = runner.invoke(
            main,
            ["preview", "/v/show/a.mkv", "--output-dir", "/mnt/out"],
            obj=make_obj(),
        )
        assert result.output.strip().endswith("/mnt/out/show/a_transcoded.mp4")

    def test_builtin_preset_needs_no_backend(self, runner, make_obj, offline_backend):
        result = runner.invoke(
            main,
            ["preview", "/v/a.mkv", "-p", "builtin-av1-fast", "--json"],
            obj=make_obj(offline_backend),
        )

        assert result.exit_code == 0, result.output
        command = json.loads(result.output)["command"]
        assert "-c:v libsvtav1" in command
        assert "-c:a opus -b:a 96k -ac 2" in command

    def test_argv_output(self, runner, make_obj):
        result = runner.invoke(
            main,
            ["preview", "/v/a.mkv", "-p", "builtin-h265-editing", "--argv", "--json"],
            obj=make_obj(),
        )

        argv = json.loads(result.output)["argv"]
        assert argv[0] == "ffmpeg"
        assert "-x265-params" in argv
        assert argv[-1] == "/output/v/a_h265_edit.mkv"

    def test_hdr_transfer_and_sdr(self, runner, make_obj, tmp_path):
        path = tmp_path / "hdr.json"
        path.write_text(json.dumps({"video": {"hdrMode": ["auto"]}}))

        result = runner.invoke(
            main,
            ["preview", "/v/a.mkv", "-c", str(path), "--hdr-transfer", "smpte2084"],
            obj=make_obj(),
        )
        assert "transfer=smpte2084" in result.output

        result = runner.invoke(
            main, ["preview", "/v/a.mkv", "-c", str(path), "--sdr"], obj=make_obj()
        )
        assert "-pix_fmt" not in result.output

    def test_invalid_config_file(self, runner, make_obj, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"encoder": "vp9"}))

        result = runner.invoke(
            main, ["preview", "-c", str(path)], obj=make_obj()
        )
        assert result.exit_code == ExitCode.VALIDATION_ERROR

    def test_unparseable_config_file(self, runner, make_obj, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")

        result = runner.invoke(main, ["preview", "-c", str(path)], obj=make_obj())
        assert result.exit_code == ExitCode.VALIDATION_ERROR


class TestRemotePreview:
    """Tests for previews that involve the backend."""

    def test_remote_preview(self, runner, make_obj):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/preview-command"
            assert json.loads(request.content)["sourceFile"] == "/v/a.mkv"
            return httpx.Response(200, json={"command": "ffmpeg -i /v/a.mkv x"})

        result = runner.invoke(
            main, ["preview", "/v/a.mkv", "--remote"], obj=make_obj(handler)
        )

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "ffmpeg -i /v/a.mkv x"

    def test_user_preset_fetched_from_backend(self, runner, make_obj, nvidia_config):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/presets/user-1"
            return httpx.Response(
                200,
                json={
                    "id": "user-1",
                    "name": "Mine",
                    "config": dump_config(nvidia_config),
                },
            )

        result = runner.invoke(
            main, ["preview", "/v/a.mkv", "-p", "user-1"], obj=make_obj(handler)
        )
        assert "hevc_nvenc" in result.output

    def test_unknown_preset_exit_code(self, runner, make_obj):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                404, json={"error": "Preset not found: nope", "code": "NOT_FOUND"}
            )

        result = runner.invoke(
            main, ["preview", "-p", "nope", "--json"], obj=make_obj(handler)
        )

        assert result.exit_code == ExitCode.NOT_FOUND
        error = json.loads(result.stderr)["error"]
        assert error == {"code": "NOT_FOUND", "message": "Preset not found: nope"}

    @pytest.mark.parametrize(
        "extra,flag",
        [
            (["--output-dir", "/mnt/out"], "--output-dir"),
            (["--hdr-transfer", "smpte2084"], "--hdr-transfer"),
            (["--sdr"], "--sdr"),
            (["--argv"], "--argv"),
        ],
    )
    def test_local_only_options_rejected_with_remote(
        self, runner, make_obj, offline_backend, extra, flag
    ):
        result = runner.invoke(
            main,
            ["preview", "/v/a.mkv", "--remote", *extra],
            obj=make_obj(offline_backend),
        )

        assert result.exit_code == 2
        assert f"{flag} cannot be combined with --remote" in result.stderr
