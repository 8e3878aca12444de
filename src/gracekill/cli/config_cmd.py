"""CLI command handlers for config.* operations."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Annotated, Any

from cyclopts import App, Parameter

from gracekill.cli.registration import Registered, register_operation_commands
from gracekill.lib.ops.config import ConfigShowInput, config_show_sync

Emitter = Callable[[Any], None]


def _config_show(
    emit: Emitter,
    config: Annotated[
        str | None,
        Parameter(name="--config", help="Path to a gracekill config.toml."),
    ] = None,
) -> None:
    emit(config_show_sync(ConfigShowInput(config_path=config)))


def register_config_commands(app: App, emit: Emitter) -> Registered:
    return register_operation_commands(
        app, "config", {"config.show": partial(_config_show, emit)}
    )
