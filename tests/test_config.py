"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from spotify_connect_pair.config import (
    Config,
    ConfigError,
    DeviceConfig,
    dict_to_config,
    load_config,
    load_env_config,
    load_yaml_config,
    merge_configs,
    validate_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "SPOTIFY_PAIR_URL",
        "SPOTIFY_PAIR_HOST",
        "SPOTIFY_PAIR_PORT",
        "SPOTIFY_PAIR_PATH",
        "SPOTIFY_PAIR_TIMEOUT",
        "SPOTIFY_PAIR_TOKEN_TYPE",
        "SPOTIFY_PAIR_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_defaults(self) -> None:
        config = Config()
        assert config.device.base_url == ""
        assert config.zeroconf.timeout == 10.0
        assert config.zeroconf.token_type == ""
        assert config.discovery.timeout == 3.0
        assert config.logging.level == "info"


class TestDeviceBaseUrl:
    def test_url_wins(self) -> None:
        device = DeviceConfig(url="http://10.0.0.5:80/zc", host="1.2.3.4", port=4070)
        assert device.base_url == "http://10.0.0.5:80/zc"

    def test_from_host_port_path(self) -> None:
        device = DeviceConfig(host="192.168.1.20", port=4070, path="zc")
        assert device.base_url == "http://192.168.1.20:4070/zc"

    def test_default_path(self) -> None:
        device = DeviceConfig(host="192.168.1.20", port=4070)
        assert device.base_url == "http://192.168.1.20:4070/"


class TestDictToConfig:
    def test_full(self) -> None:
        config = dict_to_config(
            {
                "device": {"host": "192.168.1.20", "port": 4070, "path": "/zc"},
                "zeroconf": {"timeout": 2.5, "token_type": "accesstoken"},
                "discovery": {"timeout": 8},
                "logging": {"level": "debug"},
            }
        )
        assert config.device.base_url == "http://192.168.1.20:4070/zc"
        assert config.zeroconf.timeout == 2.5
        assert config.zeroconf.token_type == "accesstoken"
        assert config.discovery.timeout == 8
        assert config.logging.level == "debug"

    def test_partial(self) -> None:
        config = dict_to_config({"device": {"url": "http://x:1/"}})
        assert config.device.url == "http://x:1/"
        assert config.zeroconf.timeout == 10.0

    def test_empty_sections(self) -> None:
        config = dict_to_config({"device": None, "zeroconf": None, "logging": None})
        assert config == Config()

    def test_section_not_mapping(self) -> None:
        with pytest.raises(ConfigError, match="'device' must be a mapping"):
            dict_to_config({"device": "http://x:1/"})


class TestValidation:
    def test_valid(self) -> None:
        config = Config()
        config.device.url = "http://192.168.1.20:4070/zc"
        validate_config(config)

    def test_device_required(self) -> None:
        with pytest.raises(ConfigError, match="host and port"):
            validate_config(Config())

    def test_device_optional(self) -> None:
        validate_config(Config(), require_device=False)

    def test_invalid_url(self) -> None:
        config = Config()
        config.device.url = "192.168.1.20:4070"
        with pytest.raises(ConfigError, match="Invalid device URL"):
            validate_config(config)

    def test_invalid_port(self) -> None:
        config = Config()
        config.device.host = "h"
        config.device.port = 70000
        with pytest.raises(ConfigError, match="Invalid device port"):
            validate_config(config)

    def test_collects_all_errors(self) -> None:
        config = Config()
        config.device.url = "nope"
        config.zeroconf.timeout = 0
        config.logging.level = "verbose"
        with pytest.raises(ConfigError) as exc_info:
            validate_config(config)
        message = str(exc_info.value)
        assert "Invalid device URL" in message
        assert "Invalid timeout" in message
        assert "Invalid log level" in message

    @pytest.mark.parametrize(
        "section, key, value, expected",
        [
            ("device", "port", "4070", "device.port must be an integer"),
            ("device", "port", True, "device.port must be an integer"),
            ("zeroconf", "timeout", "fast", "zeroconf.timeout must be a number"),
            ("discovery", "timeout", None, "discovery.timeout must be a number"),
            ("device", "host", 42, "device.host must be a string"),
            ("logging", "level", None, "logging.level must be a string"),
        ],
    )
    def test_wrong_types(self, section: str, key: str, value: object, expected: str) -> None:
        config = Config()
        config.device.url = "http://192.168.1.20:4070/zc"
        setattr(getattr(config, section), key, value)
        with pytest.raises(ConfigError, match=expected):
            validate_config(config)


class TestSources:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPOTIFY_PAIR_HOST", "10.0.0.9")
        monkeypatch.setenv("SPOTIFY_PAIR_PORT", "4070")
        monkeypatch.setenv("SPOTIFY_PAIR_TIMEOUT", "1.5")
        assert load_env_config() == {
            "device": {"host": "10.0.0.9", "port": 4070},
            "zeroconf": {"timeout": 1.5},
        }

    def test_env_invalid_number_skipped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPOTIFY_PAIR_PORT", "abc")
        assert load_env_config() == {}

    def test_yaml_missing_file(self, tmp_path: Path) -> None:
        assert load_yaml_config(tmp_path / "missing.yaml") == {}

    def test_yaml_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("device: [unclosed")
        with pytest.raises(ConfigError, match="YAML"):
            load_yaml_config(path)

    def test_merge(self) -> None:
        merged = merge_configs(
            {"device": {"host": "a", "port": 1}}, {"device": {"host": "b"}}
        )
        assert merged == {"device": {"host": "b", "port": 1}}

    def test_priority(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "device:\n  host: 192.168.1.20\n  port: 4070\nzeroconf:\n  timeout: 4\n"
        )
        monkeypatch.setenv("SPOTIFY_PAIR_PORT", "5000")
        config = load_config(path, {"zeroconf": {"timeout": 7.0}})
        assert config.device.host == "192.168.1.20"
        assert config.device.port == 5000
        assert config.zeroconf.timeout == 7.0

    def test_yaml_empty_section(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("device:\nlogging:\n  level: debug\n")
        config = load_config(path, {"device": {"url": "http://192.168.1.20:4070/zc"}})
        assert config.device.base_url == "http://192.168.1.20:4070/zc"
        assert config.logging.level == "debug"

    def test_yaml_not_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- device\n- logging\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_yaml_config(path)

    def test_yaml_string_port(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text('device:\n  host: 192.168.1.20\n  port: "4070"\n')
        with pytest.raises(ConfigError, match="device.port must be an integer"):
            load_config(path)
