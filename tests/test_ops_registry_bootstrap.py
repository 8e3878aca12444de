"""Registry bootstrap regression coverage."""

from __future__ import annotations

from gracekill.lib.ops.registry import (
    Surface,
    get_all_operations,
    get_mcp_tool_names,
    get_operation,
)


def test_get_all_operations_bootstraps_registry() -> None:
    operations = get_all_operations()
    assert operations, "Expected operation registry to bootstrap and register operations"


def test_surface_filter_and_tool_names() -> None:
    assert [op.name for op in get_all_operations(Surface.MCP)] == ["kill", "probe"]
    assert get_operation("config.show").exposed_on(Surface.CLI)
    assert get_mcp_tool_names() == frozenset({"kill", "probe"})
