"""Configuration discovery and parsing helpers."""

from gracekill.lib.config.settings import (
    GracekillConfig,
    load_config,
    resolve_config_path,
    validate_config,
)

__all__ = ["GracekillConfig", "load_config", "resolve_config_path", "validate_config"]
