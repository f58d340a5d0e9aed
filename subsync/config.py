"""
Centralized configuration management for subsync.

Configuration is loaded from multiple sources with the following priority:
1. Config file (subsync.yaml settings section) - highest priority for non-secrets
2. Environment variables - required for secrets, fallback for other settings
3. Default values - lowest priority

Secrets (API keys) ALWAYS come from environment variables. The OAuth token
file is referenced by path (credentials_file), never inlined.

Usage:
    from subsync.config import get_config

    config = get_config()
    page_size = config.api_max_results_per_page
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


# Default configuration values
DEFAULTS = {
    # Logging settings
    "log_dir": "logs",
    "log_level": "DEBUG",
    "console_log_level": "INFO",

    # API constants
    "api_max_results_per_page": 50,

    # Sync settings
    "default_max_videos": 200,
    "active_account_id": "",
    "credentials_file": "",
}

CONFIG_CANDIDATES = [
    "config/subsync.yaml",
    "../config/subsync.yaml",
    "subsync.yaml",
]


@dataclass
class Config:
    """
    Configuration container with typed access to all settings.

    Settings are loaded from config file with environment variable fallbacks.
    The API key always comes from the environment.
    """

    # Logging settings
    log_dir: str = DEFAULTS["log_dir"]
    log_level: str = DEFAULTS["log_level"]
    console_log_level: str = DEFAULTS["console_log_level"]

    # API settings
    youtube_api_key: str = ""  # Always from env var
    api_max_results_per_page: int = DEFAULTS["api_max_results_per_page"]

    # Sync settings
    default_max_videos: int = DEFAULTS["default_max_videos"]
    active_account_id: str = DEFAULTS["active_account_id"]
    credentials_file: str = DEFAULTS["credentials_file"]  # OAuth authorized-user token JSON

    # Source tracking (for debugging)
    _config_file: Optional[str] = None


# Global config instance (singleton pattern)
_config: Optional[Config] = None


def _load_yaml_settings(config_path: str) -> dict:
    """Load settings section from YAML config file."""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        return config.get("settings") or {}
    except FileNotFoundError:
        return {}
    except (OSError, yaml.YAMLError) as e:
        # Logging is configured from this module, so it cannot be used here yet
        print(f"Warning: Could not load config file {config_path}: {e}", file=sys.stderr)
        return {}


def _get_env_or_default(key: str, default, cast_type=None):
    """Get value from environment variable or return default."""
    env_value = os.environ.get(key)
    if env_value is None:
        return default
    if cast_type is not None:
        try:
            return cast_type(env_value)
        except (ValueError, TypeError):
            return default
    return env_value


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from file and environment variables.

    Args:
        config_path: Path to YAML config file (optional).
                    If not provided, tries default locations.

    Returns:
        Config object with all settings loaded.
    """
    if config_path is None:
        for candidate in CONFIG_CANDIDATES:
            if Path(candidate).exists():
                config_path = candidate
                break

    yaml_settings = {}
    if config_path and Path(config_path).exists():
        yaml_settings = _load_yaml_settings(config_path)

    # Priority: yaml > env > default
    def get_setting(yaml_key: str, env_key: str, default, cast_type=None):
        if yaml_key in yaml_settings:
            value = yaml_settings[yaml_key]
            if cast_type is not None:
                try:
                    return cast_type(value)
                except (ValueError, TypeError):
                    return _get_env_or_default(env_key, default, cast_type)
            return value
        return _get_env_or_default(env_key, default, cast_type)

    return Config(
        # Logging settings
        log_dir=get_setting("log_dir", "LOG_DIR", DEFAULTS["log_dir"]),
        log_level=get_setting("log_level", "LOG_LEVEL", DEFAULTS["log_level"]),
        console_log_level=get_setting("console_log_level", "CONSOLE_LOG_LEVEL", DEFAULTS["console_log_level"]),

        # API settings
        youtube_api_key=os.environ.get("YOUTUBE_API_KEY", ""),  # Always from env
        api_max_results_per_page=get_setting("api_max_results_per_page", "API_MAX_RESULTS_PER_PAGE", DEFAULTS["api_max_results_per_page"], int),

        # Sync settings
        default_max_videos=get_setting("default_max_videos", "DEFAULT_MAX_VIDEOS", DEFAULTS["default_max_videos"], int),
        active_account_id=get_setting("active_account_id", "SUBSYNC_ACTIVE_ACCOUNT_ID", DEFAULTS["active_account_id"], str),
        credentials_file=get_setting("credentials_file", "YOUTUBE_CREDENTIALS_FILE", DEFAULTS["credentials_file"], str),

        _config_file=config_path,
    )


def get_config(config_path: Optional[str] = None, reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Loads config once and reuses it.

    Args:
        config_path: Path to config file (only used on first load or reload)
        reload: If True, force reload of configuration
    """
    global _config

    if _config is None or reload:
        _config = load_config(config_path)

    return _config


def set_config(config: Optional[Config]) -> None:
    """
    Set the global configuration instance.

    Useful for testing; passing None makes the next get_config() reload.
    """
    global _config
    _config = config
