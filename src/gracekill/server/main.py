"""MCP stdio server exposing the kill and probe operations as tools."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, cast

from mcp.server.fastmcp import FastMCP

from gracekill.lib.logging import configure_logging
from gracekill.lib.ops.codec import coerce_input_payload, signature_from_dataclass
from gracekill.lib.ops.registry import OperationSpec, Surface, get_all_operations
from gracekill.lib.serialization import to_jsonable

_EXPOSED: dict[str, OperationSpec[Any, Any]] = {}


@asynccontextmanager
async def lifespan(_: FastMCP[Any]) -> AsyncIterator[dict[str, bool]]:
    # stdout carries the protocol; logs stay on stderr as JSON.
    configure_logging(json_mode=True, verbosity=1)
    yield {"ready": True}


mcp = FastMCP("gracekill", lifespan=lifespan)


def _tool_for(op: OperationSpec[Any, Any]) -> Callable[..., Awaitable[object]]:
    async def run_operation(**arguments: object) -> object:
        payload = coerce_input_payload(op.input_type, arguments)
        return to_jsonable(await op.handler(payload))

    # FastMCP derives the tool's input schema from the signature.
    run_operation.__name__ = op.mcp_name
    run_operation.__doc__ = op.description
    cast("Any", run_operation).__signature__ = signature_from_dataclass(op.input_type)
    return run_operation


def _expose_operations() -> None:
    for op in get_all_operations(Surface.MCP):
        mcp.tool(name=op.mcp_name, description=op.description)(_tool_for(op))
        _EXPOSED[op.name] = op


def get_registered_mcp_tools() -> set[str]:
    return {op.mcp_name for op in _EXPOSED.values()}


def get_registered_mcp_descriptions() -> dict[str, str]:
    """Tool descriptions keyed by operation name, for CLI/MCP parity checks."""

    return {name: op.description for name, op in _EXPOSED.items()}


def run_server() -> None:
    mcp.run(transport="stdio")


_expose_operations()
