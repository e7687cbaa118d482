"""
spotify-connect-pair configuration system.

Priority order (highest to lowest):
1. Command-line arguments
2. Environment variables
3. Configuration file (YAML)
4. Default values
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import yaml

logger = logging.getLogger(__name__)

# Valid log levels
VALID_LOG_LEVELS = {"debug", "info", "warning", "error"}

# Environment variable mappings
ENV_MAPPINGS = {
    # Device
    "SPOTIFY_PAIR_URL": ("device", "url"),
    "SPOTIFY_PAIR_HOST": ("device", "host"),
    "SPOTIFY_PAIR_PORT": ("device", "port"),
    "SPOTIFY_PAIR_PATH": ("device", "path"),
    # Zeroconf
    "SPOTIFY_PAIR_TIMEOUT": ("zeroconf", "timeout"),
    "SPOTIFY_PAIR_TOKEN_TYPE": ("zeroconf", "token_type"),
    # Logging
    "SPOTIFY_PAIR_LOG_LEVEL": ("logging", "level"),
}

INT_ENV_VARS = {"SPOTIFY_PAIR_PORT"}
FLOAT_ENV_VARS = {"SPOTIFY_PAIR_TIMEOUT"}


class ConfigError(Exception):
    """Configuration error."""

    pass


@dataclass
class DeviceConfig:
    """Target device configuration."""

    url: str = ""  # Full Zeroconf endpoint, overrides host/port/path
    host: str = ""
    port: int = 0
    path: str = "/"

    @property
    def base_url(self) -> str:
        """Zeroconf endpoint URL, empty if no device is configured."""
        if self.url:
            return self.url
        if not self.host or not self.port:
            return ""
        path = self.path if self.path.startswith("/") else "/" + self.path
        return f"http://{self.host}:{self.port}{path}"


@dataclass
class ZeroconfConfig:
    """Zeroconf exchange configuration."""

    timeout: float = 10.0  # Transport timeout in seconds
    token_type: str = ""  # tokenType sent with addUser, empty to omit


@dataclass
class DiscoveryConfig:
    """mDNS browse configuration."""

    timeout: float = 3.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class Config:
    """Complete spotify-connect-pair configuration."""

    device: DeviceConfig = field(default_factory=DeviceConfig)
    zeroconf: ZeroconfConfig = field(default_factory=ZeroconfConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def validate_port(port: int) -> bool:
    """Validate port number."""
    return 1 <= port <= 65535


def validate_url(url: str) -> bool:
    """Validate an http(s) URL with a host."""
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Config, require_device: bool = True) -> None:
    """
    Validate configuration.

    Args:
        config: Configuration to check
        require_device: Whether a target device must be configured

    Raises:
        ConfigError: If configuration is invalid
    """
    errors = []

    # Types (YAML and env values arrive unchecked)
    for name, value in (
        ("device.url", config.device.url),
        ("device.host", config.device.host),
        ("device.path", config.device.path),
        ("zeroconf.token_type", config.zeroconf.token_type),
        ("logging.level", config.logging.level),
    ):
        if not isinstance(value, str):
            errors.append(f"{name} must be a string, got {value!r}")
    port_ok = isinstance(config.device.port, int) and not isinstance(config.device.port, bool)
    if not port_ok:
        errors.append(f"device.port must be an integer, got {config.device.port!r}")
    for name, value in (
        ("zeroconf.timeout", config.zeroconf.timeout),
        ("discovery.timeout", config.discovery.timeout),
    ):
        if not _is_number(value):
            errors.append(f"{name} must be a number, got {value!r}")

    if errors:
        raise ConfigError("Configuration validation failed:\n  - " + "\n  - ".join(errors))

    # Device
    device = config.device
    if device.url:
        if not validate_url(device.url):
            errors.append(f"Invalid device URL: {device.url}")
    else:
        if device.port and not validate_port(device.port):
            errors.append(f"Invalid device port: {device.port}")
        if require_device and not (device.host and device.port):
            errors.append("Device URL, or host and port, is required")

    # Timeouts
    if config.zeroconf.timeout <= 0:
        errors.append(f"Invalid timeout: {config.zeroconf.timeout}")
    if config.discovery.timeout <= 0:
        errors.append(f"Invalid discovery timeout: {config.discovery.timeout}")

    # Logging
    if config.logging.level.lower() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid log level: {config.logging.level}. "
            f"Valid values: {sorted(VALID_LOG_LEVELS)}"
        )

    if errors:
        raise ConfigError("Configuration validation failed:\n  - " + "\n  - ".join(errors))


def load_yaml_config(path: Path) -> dict:
    """
    Load configuration from YAML file.

    Args:
        path: Path to YAML file

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: If file cannot be read or parsed
    """
    if not path.exists():
        logger.debug(f"Config file not found: {path}")
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML config: {e}")
    except IOError as e:
        raise ConfigError(f"Error reading config file: {e}")

    if not data:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return data


def _set_nested(d: dict, path: tuple, value: Any) -> None:
    """Set a nested dictionary value using a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def load_env_config() -> dict:
    """
    Load configuration from environment variables.

    Returns:
        Configuration dictionary with values from environment
    """
    result: dict = {}

    for env_var, path in ENV_MAPPINGS.items():
        value: Any = os.environ.get(env_var)
        if value is None:
            continue

        if env_var in INT_ENV_VARS:
            try:
                value = int(value)
            except ValueError:
                logger.warning(f"Invalid integer for {env_var}: {value}")
                continue
        elif env_var in FLOAT_ENV_VARS:
            try:
                value = float(value)
            except ValueError:
                logger.warning(f"Invalid number for {env_var}: {value}")
                continue

        _set_nested(result, path, value)

    return result


def _deep_merge(base: dict, override: dict) -> None:
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def merge_configs(*configs: dict) -> dict:
    """
    Deep merge multiple configuration dictionaries.
    Later configs override earlier ones.
    """
    result: dict = {}
    for config in configs:
        _deep_merge(result, config)
    return result


def _section(d: dict, name: str) -> dict:
    """Get a config section, treating an empty YAML section as {}."""
    section = d.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping, got {section!r}")
    return section


def dict_to_config(d: dict) -> Config:
    """
    Convert a dictionary to Config dataclass.

    Raises:
        ConfigError: If a section is not a mapping
    """
    config = Config()

    # Device
    dev = _section(d, "device")
    config.device.url = dev.get("url", config.device.url)
    config.device.host = dev.get("host", config.device.host)
    config.device.port = dev.get("port", config.device.port)
    config.device.path = dev.get("path", config.device.path)

    # Zeroconf
    z = _section(d, "zeroconf")
    config.zeroconf.timeout = z.get("timeout", config.zeroconf.timeout)
    config.zeroconf.token_type = z.get("token_type", config.zeroconf.token_type)

    # Discovery
    config.discovery.timeout = _section(d, "discovery").get("timeout", config.discovery.timeout)

    # Logging
    config.logging.level = _section(d, "logging").get("level", config.logging.level)

    return config


def load_config(
    config_path: Optional[Path] = None,
    cli_args: Optional[dict] = None,
    require_device: bool = True,
) -> Config:
    """
    Load configuration from all sources.

    Priority (highest to lowest):
    1. CLI arguments
    2. Environment variables
    3. Config file
    4. Defaults

    Args:
        config_path: Path to YAML config file
        cli_args: Dictionary of CLI arguments
        require_device: Whether a target device must be configured

    Returns:
        Merged Config object

    Raises:
        ConfigError: If configuration is invalid
    """
    configs = []

    # 1. Load from file (lowest priority of explicit configs)
    if config_path:
        file_config = load_yaml_config(config_path)
        if file_config:
            configs.append(file_config)
            logger.debug(f"Loaded config from {config_path}")

    # 2. Load from environment
    env_config = load_env_config()
    if env_config:
        configs.append(env_config)
        logger.debug("Loaded config from environment variables")

    # 3. Load from CLI (highest priority)
    if cli_args:
        configs.append(cli_args)
        logger.debug("Loaded config from CLI arguments")

    merged = merge_configs(*configs) if configs else {}

    # Convert to Config object (fills in defaults)
    config = dict_to_config(merged)

    validate_config(config, require_device=require_device)

    return config
