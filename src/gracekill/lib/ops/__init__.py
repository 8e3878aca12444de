"""Operations shared by the CLI and the MCP server."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gracekill.lib.ops.registry import OperationSpec


def get_all_operations() -> list[OperationSpec[Any, Any]]:
    """Return every registered operation, loading the op modules on first use."""

    # Deferred: the registry bootstrap imports op modules that import this package.
    from gracekill.lib.ops.registry import get_all_operations as _get_all_operations

    return _get_all_operations()


__all__ = ["get_all_operations"]
