"""Tests for `ffweb tasks` and `ffweb presets`."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from ffweb.cli import main
from ffweb.cli.exit_codes import ExitCode
from ffweb.cli.output import exit_code_for
from ffweb.domain import TaskStatus, TranscodeConfig, dump_config, dump_task
from ffweb.exceptions import (
    ApiConnectionError,
    ApiError,
    BuiltinPresetError,
    ConfigError,
    FfwebError,
    InvalidTransitionError,
    NotFoundError,
    SchemaError,
)
from ffweb.presets import BUILTIN_PRESETS


class TestTasksList:
    """Tests for `ffweb tasks list`."""

    def test_table_output(self, runner, make_obj, make_task):
        tasks = [
            make_task("aaaaaaaa-1"),
            make_task("bbbbbbbb-2", status=TaskStatus.RUNNING),
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[dump_task(t) for t in tasks])

        result = runner.invoke(main, ["tasks", "list"], obj=make_obj(handler))

        assert result.exit_code == 0, result.output
        assert "STATUS" in result.output
        assert "aaaaaaaa" in result.output
        assert "running" in result.output

    def test_status_filter_json(self, runner, make_obj, make_task):
        tasks = [make_task("a"), make_task("b", status=TaskStatus.FAILED)]

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[dump_task(t) for t in tasks])

        result = runner.invoke(
            main, ["tasks", "list", "-s", "failed", "--json"], obj=make_obj(handler)
        )

        assert [t["id"] for t in json.loads(result.output)] == ["b"]

    def test_empty(self, runner, make_obj):
        result = runner.invoke(
            main,
            ["tasks", "list"],
            obj=make_obj(lambda r: httpx.Response(200, json=[])),
        )
        assert "No tasks found." in result.output

    def test_connection_error(self, runner, make_obj):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = runner.invoke(main, ["tasks", "list"], obj=make_obj(handler))

        assert result.exit_code == ExitCode.CONNECTION_ERROR
        assert "Cannot connect" in result.stderr


class TestTasksMutations:
    """Tests for create and per-task actions."""

    def test_create_with_preset(self, runner, make_obj, make_task):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            assert body == {"sourceFiles": ["/v/a.mkv"], "preset": "builtin-av1-hq"}
            return httpx.Response(201, json=[dump_task(make_task("new"))])

        result = runner.invoke(
            main,
            ["tasks", "create", "/v/a.mkv", "-p", "builtin-av1-hq"],
            obj=make_obj(handler),
        )

        assert result.exit_code == 0, result.output
        assert "Created new: /videos/new.mkv ->" in result.output

    def test_create_with_config_file(self, runner, make_obj, make_task, tmp_path):
        path = tmp_path / "c.json"
        path.write_text(json.dumps(dump_config(TranscodeConfig())))

        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content)["config"]["encoder"] == "h265"
            return httpx.Response(201, json=[dump_task(make_task())])

        result = runner.invoke(
            main,
            ["tasks", "create", "/v/a.mkv", "-c", str(path), "--json"],
            obj=make_obj(handler),
        )
        assert len(json.loads(result.output)) == 1

    def test_pause(self, runner, make_obj, make_task):
        def handler(request: httpx.Request) -> httpx.Response:
            assert (request.method, request.url.path) == ("PUT", "/api/tasks/t1/pause")
            return httpx.Response(
                200, json=dump_task(make_task("t1", status=TaskStatus.PAUSED))
            )

        result = runner.invoke(main, ["tasks", "pause", "t1"], obj=make_obj(handler))
        assert result.output.strip() == "t1: paused"

    def test_illegal_transition_exit_code(self, runner, make_obj):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                409,
                json={
                    "error": "Cannot pause a task that is running",
                    "code": "INVALID_TRANSITION",
                },
            )

        result = runner.invoke(main, ["tasks", "pause", "t1"], obj=make_obj(handler))

        assert result.exit_code == ExitCode.INVALID_TRANSITION
        assert "Error: Cannot pause a task that is running" in result.stderr

    def test_delete(self, runner, make_obj):
        result = runner.invoke(
            main,
            ["tasks", "delete", "t1", "--json"],
            obj=make_obj(lambda r: httpx.Response(204)),
        )
        assert json.loads(result.output) == {"status": "deleted", "id": "t1"}

    def test_retry(self, runner, make_obj, make_task):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            return httpx.Response(201, json=dump_task(make_task("t2")))

        result = runner.invoke(main, ["tasks", "retry", "t1"], obj=make_obj(handler))
        assert result.output.strip() == "t2: pending"

    def test_show(self, runner, make_obj, make_task):
        task = make_task("t1", status=TaskStatus.FAILED, error="Encoder crashed")
        result = runner.invoke(
            main,
            ["tasks", "show", "t1"],
            obj=make_obj(lambda r: httpx.Response(200, json=dump_task(task))),
        )

        assert "Status:   failed" in result.output
        assert "Encoder crashed" in result.output


class TestPresets:
    """Tests for `ffweb presets`."""

    def test_list_builtin_offline(self, runner, make_obj, offline_backend):
        result = runner.invoke(
            main, ["presets", "list", "--builtin"], obj=make_obj(offline_backend)
        )

        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert len(lines) == len(BUILTIN_PRESETS)
        assert all(line.startswith("*") for line in lines)

    def test_delete_builtin_refused_without_request(
        self, runner, make_obj, offline_backend
    ):
        result = runner.invoke(
            main,
            ["presets", "delete", "builtin-h265-balanced"],
            obj=make_obj(offline_backend),
        )
        assert result.exit_code == ExitCode.BUILTIN_PRESET

    def test_create(self, runner, make_obj, tmp_path: Path):
        path = tmp_path / "c.json"
        path.write_text("{}")

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            return httpx.Response(
                201, json={"id": "u1", "name": body["name"], "config": body["config"]}
            )

        result = runner.invoke(
            main,
            ["presets", "create", "-n", "Mine", "-c", str(path)],
            obj=make_obj(handler),
        )
        assert result.output.strip() == "Created preset u1 (Mine)"


class TestExitCodeFor:
    """Tests for exit_code_for()."""

    @pytest.mark.parametrize(
        "error,code",
        [
            (ApiError(404, "x", "NOT_FOUND"), ExitCode.NOT_FOUND),
            (ApiError(403, "x", "BUILTIN_PRESET"), ExitCode.BUILTIN_PRESET),
            (ApiError(500, "x"), ExitCode.API_ERROR),
            (ApiConnectionError("down"), ExitCode.CONNECTION_ERROR),
            (ConfigError("bad"), ExitCode.CONFIG_ERROR),
            (SchemaError("bad"), ExitCode.VALIDATION_ERROR),
            (NotFoundError("task", "t"), ExitCode.NOT_FOUND),
            (InvalidTransitionError("running", "pause"), ExitCode.INVALID_TRANSITION),
            (BuiltinPresetError("p", "delete"), ExitCode.BUILTIN_PRESET),
            (FfwebError("other"), ExitCode.GENERAL_ERROR),
        ],
    )
    def test_mapping(self, error, code):
        assert exit_code_for(error) == code


class TestMainGroup:
    """Tests for the top-level group."""

    def test_bad_config_file_is_config_error(self, runner, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[server\n")

        result = runner.invoke(
            main, ["--config", str(path), "presets", "list", "--builtin"]
        )

        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "Cannot load config file" in result.stderr

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.4.0" in result.output
