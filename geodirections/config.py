"""
Configuration module with environment variable validation.

Library defaults (endpoint, timeouts, URL limits) live in config.yaml.
Credentials come from the environment or a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Any

import yaml


class ConfigurationError(Exception):
    """Raised when required configuration is missing."""
    pass


# Load YAML config once at module level
_CONFIG_PATH = Path(__file__).parent / "config.yaml"
_YAML_CONFIG: dict = {}


def _load_yaml_config() -> dict:
    """Load configuration from config.yaml file."""
    global _YAML_CONFIG
    if not _YAML_CONFIG:
        if _CONFIG_PATH.exists():
            with open(_CONFIG_PATH, "r") as f:
                _YAML_CONFIG = yaml.safe_load(f) or {}
        else:
            raise ConfigurationError(f"Configuration file not found: {_CONFIG_PATH}")
    return _YAML_CONFIG


def get_yaml_setting(*keys: str, default: Any = None) -> Any:
    """
    Get a setting from config.yaml by key path.

    Example: get_yaml_setting("service", "timeout_s") -> 30.0
    """
    config = _load_yaml_config()
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def get_required_env(key: str) -> str:
    """Get a required environment variable. Raises if not set."""
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        raise ConfigurationError(
            f"Missing required environment variable: {key}\n"
            f"Please set {key} in your .env file or environment."
        )
    return value.strip()


def get_optional_env(key: str) -> Optional[str]:
    """Get an optional environment variable. Returns None if not set."""
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return None
    return value.strip()


@dataclass(frozen=True)
class Config:
    """Client configuration - immutable after creation."""

    # Required credentials
    access_token: str

    # Service endpoint
    api_endpoint: str

    # HTTP settings
    timeout_s: float
    maximum_url_length: int

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables and config.yaml."""
        access_token = get_required_env("MAPBOX_ACCESS_TOKEN")

        # Optional override of the default endpoint
        api_endpoint = get_optional_env("MAPBOX_API_BASE_URL") or get_yaml_setting(
            "service", "api_endpoint", default="https://api.mapbox.com"
        )

        return cls(
            access_token=access_token,
            api_endpoint=api_endpoint.rstrip("/"),
            timeout_s=float(get_yaml_setting("service", "timeout_s", default=30.0)),
            maximum_url_length=int(
                get_yaml_setting("service", "maximum_url_length", default=1024 * 8)
            ),
        )


def load_config() -> Config:
    """Load and validate configuration."""
    from dotenv import load_dotenv

    # Load .env file if present
    load_dotenv()

    return Config.from_env()
