"""Operational config loader: defaults, TOML file, then environment.

A config file may use sections or flat keys:

    [timeouts]
    grace_seconds = 25          # or `grace`, or top-level `grace_seconds`
    poll_interval_seconds = 0.1

    [escalation]
    failure = true              # exit 3 when SIGKILL was needed
"""

from __future__ import annotations

import logging
import math
import os
import tomllib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GRACEKILL_CONFIG"


@dataclass(frozen=True, slots=True)
class GracekillConfig:
    """Resolved operational configuration for gracekill.

    Older releases shipped a 25s grace period and failed the run on
    escalation; both are settings here rather than fixed behavior.
    """

    grace_seconds: float = 30.0
    poll_interval_seconds: float = 0.1
    escalation_is_failure: bool = False


@dataclass(frozen=True, slots=True)
class _Setting:
    field: str
    kind: type[float] | type[bool]
    file_keys: tuple[str, ...]
    env_var: str


_SETTINGS = (
    _Setting(
        field="grace_seconds",
        kind=float,
        file_keys=("grace_seconds", "timeouts.grace_seconds", "timeouts.grace"),
        env_var="GRACEKILL_GRACE_SECONDS",
    ),
    _Setting(
        field="poll_interval_seconds",
        kind=float,
        file_keys=(
            "poll_interval_seconds",
            "timeouts.poll_interval_seconds",
            "timeouts.poll_interval",
        ),
        env_var="GRACEKILL_POLL_INTERVAL_SECONDS",
    ),
    _Setting(
        field="escalation_is_failure",
        kind=bool,
        file_keys=(
            "escalation_is_failure",
            "escalation.failure",
            "escalation.escalation_is_failure",
        ),
        env_var="GRACEKILL_ESCALATION_IS_FAILURE",
    ),
)

_BY_FILE_KEY = {key: setting for setting in _SETTINGS for key in setting.file_keys}
_SECTIONS = frozenset(key.partition(".")[0] for key in _BY_FILE_KEY if "." in key)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _flatten(payload: Mapping[str, Any]) -> Iterator[tuple[str, Any]]:
    """Yield `(dotted_key, value)` for known sections and top-level keys."""

    for key, value in payload.items():
        if key not in _SECTIONS:
            yield key, value
        elif isinstance(value, dict):
            for inner_key, inner_value in value.items():
                yield f"{key}.{inner_key}", inner_value
        else:
            raise ValueError(f"Invalid value for '{key}': expected table.")


def _from_file(setting: _Setting, key: str, value: object) -> float | bool:
    # TOML booleans are never durations; TOML integers are never flags.
    if setting.kind is bool and isinstance(value, bool):
        return value
    if setting.kind is float and isinstance(value, int | float) and not isinstance(value, bool):
        return float(value)
    raise ValueError(
        f"Invalid value for '{key}': expected {setting.kind.__name__}, got "
        f"{type(value).__name__} ({value!r})."
    )


def _from_env(setting: _Setting, raw: str) -> float | bool:
    normalized = raw.strip().lower()
    if setting.kind is bool:
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    else:
        try:
            return float(normalized)
        except ValueError:
            pass
    raise ValueError(
        f"Invalid environment override '{setting.env_var}': "
        f"expected {setting.kind.__name__}, got {raw!r}."
    )


def validate_config(config: GracekillConfig) -> None:
    if not math.isfinite(config.grace_seconds) or config.grace_seconds < 0:
        raise ValueError(
            f"Invalid grace_seconds: expected a finite value >= 0, got {config.grace_seconds!r}."
        )
    if not math.isfinite(config.poll_interval_seconds) or config.poll_interval_seconds <= 0:
        raise ValueError(
            "Invalid poll_interval_seconds: expected a finite value > 0, got "
            f"{config.poll_interval_seconds!r}."
        )


def resolve_config_path(environ: Mapping[str, str] | None = None) -> Path:
    """Return `$GRACEKILL_CONFIG` or the XDG config location."""

    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV_VAR, "").strip()
    if explicit:
        return Path(explicit).expanduser()
    xdg_home = env.get("XDG_CONFIG_HOME", "").strip()
    base = Path(xdg_home).expanduser() if xdg_home else Path.home() / ".config"
    return base / "gracekill" / "config.toml"


def load_config(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> GracekillConfig:
    """Load the config file (when present) and apply environment overrides.

    An explicit `path` must exist; the discovered default location may not.
    """

    env = os.environ if environ is None else environ
    config_path = path if path is not None else resolve_config_path(env)
    overrides: dict[str, float | bool] = {}

    if config_path.is_file():
        payload = tomllib.loads(config_path.read_text(encoding="utf-8"))
        for key, value in _flatten(payload):
            setting = _BY_FILE_KEY.get(key)
            if setting is None:
                logger.warning("Ignoring unknown gracekill config key '%s'.", key)
                continue
            overrides[setting.field] = _from_file(setting, key, value)
    elif path is not None:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    for setting in _SETTINGS:
        raw = env.get(setting.env_var)
        if raw is not None:
            overrides[setting.field] = _from_env(setting, raw)

    config = replace(GracekillConfig(), **overrides)
    validate_config(config)
    return config
