"""Configuration management for the Firefly client.

This module handles loading and validating client configuration from a
JSON config file and environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError
from .url_validator import DEFAULT_API_URL, validate_and_normalize_endpoint

# Default configuration values
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "warning"
DEFAULT_CONFIG_PATH = Path.home() / ".firefly" / "config.json"
VALID_LOG_LEVELS = ["debug", "info", "warning", "error"]
MIN_TIMEOUT = 1
MAX_TIMEOUT = 300

ENV_ACCESS_KEY = "FIREFLY_ACCESS_KEY"
ENV_SECRET_KEY = "FIREFLY_SECRET_KEY"
ENV_API_URL = "FIREFLY_API_URL"
ENV_TIMEOUT = "FIREFLY_TIMEOUT"
ENV_LOG_LEVEL = "FIREFLY_LOG_LEVEL"

logger = logging.getLogger(__name__)


@dataclass
class ClientConfig:
    """Configuration for a Firefly API client.

    Args:
        access_key: Firefly access key used for login
        secret_key: Firefly secret key used for login
        api_url: Base URL of the Firefly API (default: production endpoint)
        timeout: Per-call timeout in seconds (1-300, default: 30)
        log_level: Logging level used by the CLI (default: warning)
    """

    access_key: str
    secret_key: str
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.access_key:
            raise ConfigurationError("access_key cannot be empty")

        if not self.secret_key:
            raise ConfigurationError("secret_key cannot be empty")

        if self.timeout < MIN_TIMEOUT or self.timeout > MAX_TIMEOUT:
            raise ConfigurationError(
                f"timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} seconds. "
                f"Got: {self.timeout}"
            )

        if self.log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {VALID_LOG_LEVELS}. Got: {self.log_level}"
            )

        self.api_url = validate_and_normalize_endpoint(self.api_url)


def _read_config_file(path: Path) -> Dict[str, Any]:
    file_perms = os.stat(path).st_mode & 0o777
    if file_perms != 0o600:
        logger.warning(
            f"Configuration file {path} has insecure permissions {oct(file_perms)}. "
            f"Recommend setting to 0600: chmod 0600 {path}"
        )

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {path}", details=str(e)) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return data


def load_config(
    config_path: Optional[str] = None, use_env: bool = True
) -> ClientConfig:
    """Load configuration from file and/or environment variables.

    Args:
        config_path: Path to config JSON file. When omitted the default
            ~/.firefly/config.json is read if it exists.
        use_env: Whether environment variables override file values

    Returns:
        ClientConfig instance

    Raises:
        ConfigurationError: If the file is unreadable, a required field is
            missing, or a value is invalid

    Environment Variables:
        FIREFLY_ACCESS_KEY: Access key (overrides file)
        FIREFLY_SECRET_KEY: Secret key (overrides file)
        FIREFLY_API_URL: API endpoint (overrides file)
        FIREFLY_TIMEOUT: Timeout in seconds (overrides file)
        FIREFLY_LOG_LEVEL: Log level (overrides file)
    """
    config_data: Dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path).expanduser().resolve()
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        config_data = _read_config_file(path)
    elif DEFAULT_CONFIG_PATH.exists():
        config_data = _read_config_file(DEFAULT_CONFIG_PATH)

    if use_env:
        if ENV_ACCESS_KEY in os.environ:
            config_data["access_key"] = os.environ[ENV_ACCESS_KEY]
        if ENV_SECRET_KEY in os.environ:
            config_data["secret_key"] = os.environ[ENV_SECRET_KEY]
        if ENV_API_URL in os.environ:
            config_data["api_url"] = os.environ[ENV_API_URL]
        if ENV_TIMEOUT in os.environ:
            try:
                config_data["timeout"] = float(os.environ[ENV_TIMEOUT])
            except ValueError as e:
                raise ConfigurationError(
                    f"{ENV_TIMEOUT} must be a number. Got: {os.environ[ENV_TIMEOUT]}"
                ) from e
        if ENV_LOG_LEVEL in os.environ:
            config_data["log_level"] = os.environ[ENV_LOG_LEVEL].lower()

    if "access_key" not in config_data:
        raise ConfigurationError(
            "Missing required field: access_key\n"
            f"  Fix: Set {ENV_ACCESS_KEY} environment variable\n"
            "  Or: Add 'access_key' to ~/.firefly/config.json"
        )
    if "secret_key" not in config_data:
        raise ConfigurationError(
            "Missing required field: secret_key\n"
            f"  Fix: Set {ENV_SECRET_KEY} environment variable\n"
            "  Or: Add 'secret_key' to ~/.firefly/config.json"
        )

    known_fields = {"access_key", "secret_key", "api_url", "timeout", "log_level"}
    unknown = sorted(set(config_data) - known_fields)
    if unknown:
        logger.warning(f"Ignoring unknown configuration fields: {', '.join(unknown)}")

    return ClientConfig(**{k: v for k, v in config_data.items() if k in known_fields})
