"""Attach registry operations to cyclopts apps."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from cyclopts import App

from gracekill.lib.ops.registry import Surface, get_all_operations

Registered: TypeAlias = tuple[set[str], dict[str, str]]


def register_operation_commands(
    app: App,
    group: str,
    handlers: Mapping[str, Callable[..., Any]],
) -> Registered:
    """Register every CLI operation in `group` on `app`.

    Returns the registered operation names and their descriptions so the
    parity tests can compare them with the MCP side.
    """

    registered: set[str] = set()
    descriptions: dict[str, str] = {}
    for op in get_all_operations(Surface.CLI):
        if op.cli_group != group:
            continue
        handler = handlers.get(op.name)
        if handler is None:
            raise ValueError(f"No CLI handler registered for operation '{op.name}'")
        # partial objects carry no __name__ of their own.
        handler.__name__ = f"cmd_{op.mcp_name}"
        app.command(handler, name=op.cli_name, help=op.description)
        registered.add(op.name)
        descriptions[op.name] = op.description
    return registered, descriptions
