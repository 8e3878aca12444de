"""Surface parity checks between registry, CLI, and MCP server."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from gracekill.cli.main import get_registered_cli_commands, get_registered_cli_descriptions
from gracekill.lib.ops.registry import (
    CLI_ONLY,
    OperationSpec,
    Surface,
    get_all_operations,
    operation,
)
from gracekill.server.main import get_registered_mcp_descriptions, get_registered_mcp_tools


@dataclass(frozen=True, slots=True)
class _DupInput:
    pass


@dataclass(frozen=True, slots=True)
class _DupOutput:
    ok: bool


async def _dup_async(_: _DupInput) -> _DupOutput:
    return _DupOutput(ok=True)


def _dup_sync(_: _DupInput) -> _DupOutput:
    return _DupOutput(ok=True)


def _spec(name: str, surfaces: frozenset[Surface]) -> OperationSpec[_DupInput, _DupOutput]:
    return OperationSpec(
        name=name,
        handler=_dup_async,
        sync_handler=_dup_sync,
        input_type=_DupInput,
        output_type=_DupOutput,
        description=name,
        surfaces=surfaces,
    )


def test_every_operation_is_on_its_declared_surfaces() -> None:
    cli_commands = get_registered_cli_commands()
    mcp_tools = get_registered_mcp_tools()

    for op in get_all_operations():
        assert (op.mcp_name in mcp_tools) == op.exposed_on(Surface.MCP), op.name
        assert (op.name in cli_commands) == op.exposed_on(Surface.CLI), op.name


def test_cli_help_matches_mcp_description() -> None:
    cli_descriptions = get_registered_cli_descriptions()
    mcp_descriptions = get_registered_mcp_descriptions()

    for op in get_all_operations():
        if op.surfaces == frozenset(Surface):
            assert cli_descriptions[op.name] == mcp_descriptions[op.name]


def test_expected_operations_are_registered() -> None:
    assert {op.name for op in get_all_operations()} == {"config.show", "kill", "probe"}
    assert get_registered_mcp_tools() == {"kill", "probe"}
    assert get_registered_cli_commands() == {"config.show", "kill", "probe"}


def test_dotted_names_map_to_cli_group_and_tool_name() -> None:
    spec = _spec("config.show", CLI_ONLY)

    assert spec.cli_group == "config"
    assert spec.cli_name == "show"
    assert spec.mcp_name == "config_show"
    assert _spec("kill", CLI_ONLY).cli_group == ""


def test_duplicate_operation_name_guard() -> None:
    with pytest.raises(ValueError, match="Duplicate operation name"):
        operation(_spec("kill", frozenset(Surface)))


def test_operation_needs_a_surface() -> None:
    with pytest.raises(ValueError, match="not exposed on any surface"):
        operation(_spec("hidden", frozenset()))
