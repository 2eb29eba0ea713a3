"""Fixtures for CLI tests."""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx
import pytest
from click.testing import CliRunner

from ffweb.client import ApiClient
from ffweb.config import FfwebConfig, LoggingConfig, SettingsConfig

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The main group reconfigures logging; undo it after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cli_config() -> FfwebConfig:
    return FfwebConfig(
        settings=SettingsConfig(default_output_path="/output"),
        logging=LoggingConfig(level="error"),
    )


@pytest.fixture
def make_obj(cli_config: FfwebConfig) -> Callable[..., dict]:
    """Build the click context object, optionally with a mocked backend."""

    def _make(handler: Handler | None = None) -> dict:
        obj: dict = {"config": cli_config}
        if handler is not None:
            obj["client"] = ApiClient(
                "http://backend:8080", transport=httpx.MockTransport(handler)
            )
        return obj

    return _make


@pytest.fixture
def offline_backend() -> Handler:
    """Backend handler that fails the test if any request is made."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request {request.method} {request.url}")

    return handler
