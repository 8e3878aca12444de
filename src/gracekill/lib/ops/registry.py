"""Registry of operations exposed as CLI commands and MCP tools.

Each operation module registers itself on import. The CLI and the MCP server
both build their surface from this registry, so a command and its tool share
one name, one input dataclass and one description.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from importlib import import_module
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class Surface(StrEnum):
    CLI = "cli"
    MCP = "mcp"


ALL_SURFACES: frozenset[Surface] = frozenset(Surface)
CLI_ONLY: frozenset[Surface] = frozenset({Surface.CLI})


@dataclass(frozen=True, slots=True)
class OperationSpec(Generic[InputT, OutputT]):
    """One operation; `name` is dotted (`config.show`) for grouped CLI commands."""

    name: str
    handler: Callable[[InputT], Coroutine[Any, Any, OutputT]]
    sync_handler: Callable[[InputT], OutputT]
    input_type: type[InputT]
    output_type: type[OutputT]
    description: str
    surfaces: frozenset[Surface] = ALL_SURFACES

    @property
    def cli_group(self) -> str:
        """Sub-app the command lives under; empty for top-level commands."""

        group, _, _ = self.name.rpartition(".")
        return group

    @property
    def cli_name(self) -> str:
        return self.name.rpartition(".")[2]

    @property
    def mcp_name(self) -> str:
        return self.name.replace(".", "_")

    def exposed_on(self, surface: Surface) -> bool:
        return surface in self.surfaces


_OPERATION_MODULES = (
    "gracekill.lib.ops.config",
    "gracekill.lib.ops.kill",
    "gracekill.lib.ops.probe",
)

_REGISTRY: dict[str, OperationSpec[Any, Any]] = {}
_bootstrapped = False


def operation(spec: OperationSpec[InputT, OutputT]) -> OperationSpec[InputT, OutputT]:
    """Register `spec`; names are unique and every op needs at least one surface."""

    if not spec.surfaces:
        raise ValueError(f"Operation '{spec.name}' is not exposed on any surface")
    if spec.name in _REGISTRY:
        raise ValueError(f"Duplicate operation name '{spec.name}'")
    _REGISTRY[spec.name] = spec
    return spec


def get_all_operations(surface: Surface | None = None) -> list[OperationSpec[Any, Any]]:
    """Registered operations sorted by name, optionally only those on `surface`."""

    _ensure_bootstrapped()
    specs = [_REGISTRY[name] for name in sorted(_REGISTRY)]
    if surface is None:
        return specs
    return [spec for spec in specs if spec.exposed_on(surface)]


def get_operation(name: str) -> OperationSpec[Any, Any]:
    _ensure_bootstrapped()
    return _REGISTRY[name]


def get_mcp_tool_names() -> frozenset[str]:
    return frozenset(spec.mcp_name for spec in get_all_operations(Surface.MCP))


def _ensure_bootstrapped() -> None:
    global _bootstrapped
    if _bootstrapped:
        return
    for module in _OPERATION_MODULES:
        import_module(module)

    # Set only after the imports succeed so a failed import is retried.
    _bootstrapped = True
