"""Serialization helpers shared by the CLI and MCP surfaces."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, cast


def to_jsonable(value: Any) -> Any:
    """Convert supported values to JSON-serializable payloads.

    Derived counters on result types are exposed through an optional
    `summary()` method so they survive serialization.
    """

    if is_dataclass(value) and not isinstance(value, type):
        payload = {field.name: to_jsonable(getattr(value, field.name)) for field in fields(value)}
        summary = getattr(value, "summary", None)
        if callable(summary):
            payload.update(to_jsonable(summary()))
        return payload
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        typed_dict = cast("dict[object, object]", value)
        return {str(key): to_jsonable(item) for key, item in typed_dict.items()}
    if isinstance(value, (list, tuple, set)):
        typed_seq = cast("list[object] | tuple[object, ...] | set[object]", value)
        return [to_jsonable(item) for item in typed_seq]
    return value
