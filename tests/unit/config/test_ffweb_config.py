"""Tests for configuration models, env reading, layering and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from ffweb.config import (
    ClientConfig,
    ConfigBuilder,
    ConfigSource,
    EnvReader,
    FfwebConfig,
    LoggingConfig,
    ServerConfig,
    SettingsConfig,
    TelemetryConfig,
    get_config,
    get_default_config_path,
    load_config_file,
    source_from_env,
    source_from_file,
)
from ffweb.exceptions import ConfigError


class TestModels:
    """Tests for section validation."""

    def test_defaults(self):
        config = FfwebConfig()

        assert config.server.port == 8080
        assert config.client.base_url == "http://localhost:8080"
        assert config.telemetry.max_reconnect_attempts == 5
        assert config.logging.level == "info"

    @pytest.mark.parametrize("port", [0, 70000])
    def test_invalid_port(self, port):
        with pytest.raises(ValueError, match="port"):
            ServerConfig(port=port)

    def test_client_requires_http_scheme(self):
        with pytest.raises(ValueError, match="base_url"):
            ClientConfig(base_url="ftp://host")

    def test_telemetry_delay_bounds(self):
        with pytest.raises(ValueError, match="max_delay_ms"):
            TelemetryConfig(base_delay_ms=1000, max_delay_ms=500)
        with pytest.raises(ValueError, match="max_reconnect_attempts"):
            TelemetryConfig(max_reconnect_attempts=-1)

    def test_logging_level_and_format(self):
        with pytest.raises(ValueError, match="level"):
            LoggingConfig(level="trace")
        with pytest.raises(ValueError, match="format"):
            LoggingConfig(format="xml")

    def test_settings_conversion(self):
        settings = SettingsConfig(default_output_path="/srv", ffmpeg_path="/bin/ff")
        converted = settings.to_settings()

        assert converted.default_output_path == "/srv"
        assert converted.ffmpeg_path == "/bin/ff"

    def test_telemetry_url_from_client(self):
        config = FfwebConfig(client=ClientConfig(base_url="https://media:8443"))
        assert config.telemetry_url == "wss://media:8443/api/ws/progress"

    def test_telemetry_url_from_explicit_origin(self):
        config = FfwebConfig(telemetry=TelemetryConfig(origin="http://desktop:9000"))
        assert config.telemetry_url == "ws://desktop:9000/api/ws/progress"


class TestEnvReader:
    """Tests for EnvReader."""

    def test_typed_values(self):
        reader = EnvReader(
            {
                "A": "text",
                "N": "42",
                "F": "1.5",
                "B": "Yes",
                "P": "~/logs/ffweb.log",
            }
        )

        assert reader.get_str("A") == "text"
        assert reader.get_int("N") == 42
        assert reader.get_float("F") == 1.5
        assert reader.get_bool("B") is True
        assert reader.get_path("P") == Path("~/logs/ffweb.log").expanduser()

    def test_unset_and_empty(self):
        reader = EnvReader({"EMPTY": ""})

        assert reader.get_str("MISSING") is None
        assert reader.get_str("EMPTY") is None
        assert reader.get_bool("MISSING") is None
        assert reader.get_path("EMPTY") is None

    def test_invalid_number_logged_and_ignored(self, caplog):
        reader = EnvReader({"N": "lots"})

        assert reader.get_int("N") is None
        assert "Invalid integer value for N" in caplog.text

    def test_false_values(self):
        assert EnvReader({"B": "off"}).get_bool("B") is False


class TestBuilder:
    """Tests for ConfigBuilder layering."""

    def test_later_sources_win(self):
        builder = ConfigBuilder()
        builder.apply(ConfigSource(server_port=9000, logging_level="debug"))
        builder.apply(ConfigSource(server_port=9100))

        config = builder.build()

        assert config.server.port == 9100
        assert config.logging.level == "debug"

    def test_none_does_not_override(self):
        builder = ConfigBuilder()
        builder.apply(ConfigSource(client_base_url="http://a:1"))
        builder.apply(ConfigSource(client_base_url=None))
        assert builder.build().client.base_url == "http://a:1"

    def test_source_from_file_sections(self):
        source = source_from_file(
            {
                "server": {"port": 9001, "unknown": True},
                "client": {"base_url": "http://b:2"},
                "settings": {"max_concurrent_tasks": 4},
                "logging": {"file": "~/ffweb.log"},
                "not_a_section": {"x": 1},
                "telemetry": "not a table",
            }
        )

        assert source.server_port == 9001
        assert source.client_base_url == "http://b:2"
        assert source.settings_max_concurrent_tasks == 4
        assert source.logging_file == Path("~/ffweb.log").expanduser()
        assert source.telemetry_origin is None

    def test_source_from_env(self):
        source = source_from_env(
            EnvReader(
                {
                    "FFWEB_API_URL": "http://c:3",
                    "FFWEB_SERVER_PORT": "7000",
                    "FFWEB_SIMULATE": "true",
                    "FFWEB_TELEMETRY_MAX_RECONNECT_ATTEMPTS": "8",
                    "FFWEB_DEFAULT_OUTPUT_PATH": "/data/out",
                    "FFWEB_LOG_FORMAT": "json",
                }
            )
        )

        assert source.client_base_url == "http://c:3"
        assert source.server_port == 7000
        assert source.server_simulate is True
        assert source.telemetry_max_reconnect_attempts == 8
        assert source.settings_default_output_path == "/data/out"
        assert source.logging_format == "json"


class TestLoader:
    """Tests for load_config_file() and get_config()."""

    def test_missing_file_is_empty(self, tmp_path: Path):
        assert load_config_file(tmp_path / "nope.toml") == {}

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[server\nport = ")

        assert load_config_file(path) == {}
        with pytest.raises(ConfigError, match="Cannot load config file"):
            load_config_file(path, strict=True)

    def test_default_path_honours_env(self, tmp_path: Path):
        reader = EnvReader({"FFWEB_CONFIG_PATH": str(tmp_path / "c.toml")})
        assert get_default_config_path(reader) == tmp_path / "c.toml"

    def test_precedence_file_env_cli(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text(
            "[server]\nport = 9001\nbind = '0.0.0.0'\n\n"
            "[client]\nbase_url = 'http://file:1'\n\n"
            "[logging]\nlevel = 'warning'\n"
        )
        reader = EnvReader({"FFWEB_SERVER_PORT": "9002", "FFWEB_LOG_LEVEL": "error"})

        config = get_config(
            path, cli=ConfigSource(logging_level="debug"), env_reader=reader
        )

        assert config.server.bind == "0.0.0.0"
        assert config.server.port == 9002
        assert config.client.base_url == "http://file:1"
        assert config.logging.level == "debug"

    def test_invalid_values_raise_config_error(self, tmp_path: Path):
        reader = EnvReader({"FFWEB_MAX_CONCURRENT_TASKS": "0"})
        with pytest.raises(ConfigError, match="max_concurrent_tasks"):
            get_config(tmp_path / "none.toml", env_reader=reader)

    def test_wrong_value_types_raise_config_error(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[server]\nport = 'eighty'\n")
        with pytest.raises(ConfigError):
            get_config(path, env_reader=EnvReader({}))
