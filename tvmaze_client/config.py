"""
Configuration management for the TVmaze client.

Handles loading, validation, and access to client configuration.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

from tvmaze_client.cache.base import ONE_HOUR, ONE_WEEK

# Global configuration instance
_config: Optional["ClientConfig"] = None


class TVMazeConfig(BaseModel):
    """TVmaze API access configuration."""
    base_uri: str = "https://api.tvmaze.com"
    region: Optional[str] = None  # Two-letter country code, e.g. "US"
    timeout: float = 180.0
    use_cache: bool = True
    user_agent: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)


class CacheSettings(BaseModel):
    """Response cache configuration."""
    file: str = "tvmaze.cache"
    default_ttl: int = ONE_WEEK
    cleanup_interval: int = ONE_HOUR


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ClientConfig(BaseModel):
    """Main TVmaze client configuration."""
    tvmaze: TVMazeConfig = Field(default_factory=TVMazeConfig)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> ClientConfig:
    """
    Load configuration from file.
    
    Args:
        config_path: Path to config file. Defaults to config.yaml in the
            working directory.
    
    Returns:
        Loaded and validated configuration.
    """
    global _config
    
    if config_path is None and Path("config.yaml").exists():
        config_path = "config.yaml"
    
    config_data: dict[str, Any] = {}
    
    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}
    
    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)
    
    _config = ClientConfig(**config_data)
    return _config


def get_config() -> ClientConfig:
    """
    Get the current configuration.
    
    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> ClientConfig:
    """
    Reload configuration from disk.
    
    Returns:
        Freshly loaded configuration.
    """
    global _config
    _config = None
    return load_config()


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}
    
    # Map of environment variables to config paths and whether to coerce
    # the value; string fields are passed through as-is
    env_map = {
        "TVMAZE_BASE_URI": (("tvmaze", "base_uri"), False),
        "TVMAZE_REGION": (("tvmaze", "region"), False),
        "TVMAZE_TIMEOUT": (("tvmaze", "timeout"), True),
        "TVMAZE_USE_CACHE": (("tvmaze", "use_cache"), True),
        "TVMAZE_USER_AGENT": (("tvmaze", "user_agent"), False),
        "TVMAZE_CACHE_FILE": (("cache", "file"), False),
        "TVMAZE_CACHE_TTL": (("cache", "default_ttl"), True),
        "TVMAZE_LOG_LEVEL": (("logging", "level"), False),
        "TVMAZE_LOG_FILE": (("logging", "file"), False),
    }
    
    for env_var, (path, coerce) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(overrides, path, _parse_env_value(value) if coerce else value)
    
    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    # Boolean
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False
    
    # Integer
    try:
        return int(value)
    except ValueError:
        pass
    
    # Float
    try:
        return float(value)
    except ValueError:
        pass
    
    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
