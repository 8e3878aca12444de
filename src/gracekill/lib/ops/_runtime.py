"""Shared config resolution for operation handlers."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from gracekill.lib.config.settings import GracekillConfig, load_config, validate_config


def resolve_settings(
    *,
    config_path: str | None,
    grace_seconds: float | None = None,
    poll_interval_seconds: float | None = None,
    escalation_is_failure: bool | None = None,
) -> GracekillConfig:
    """Load config and apply per-call overrides on top of it."""

    path = Path(config_path).expanduser() if config_path else None
    config = load_config(path)
    if grace_seconds is not None:
        config = replace(config, grace_seconds=float(grace_seconds))
    if poll_interval_seconds is not None:
        config = replace(config, poll_interval_seconds=float(poll_interval_seconds))
    if escalation_is_failure is not None:
        config = replace(config, escalation_is_failure=escalation_is_failure)
    validate_config(config)
    return config
