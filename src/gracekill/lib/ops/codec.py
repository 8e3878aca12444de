"""Turn loosely typed MCP tool arguments into operation input dataclasses."""

from __future__ import annotations

import inspect
import types
from collections.abc import Mapping
from dataclasses import MISSING, Field, fields, is_dataclass
from typing import Any, TypeVar, Union, cast, get_args, get_origin, get_type_hints

PayloadT = TypeVar("PayloadT")

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off", ""})


def normalize_optional(annotation: Any) -> tuple[Any, bool]:
    """Split `T | None` into `(T, True)`; anything else is `(annotation, False)`."""

    if get_origin(annotation) not in (types.UnionType, Union):
        return annotation, False
    members = [arg for arg in get_args(annotation) if arg is not type(None)]
    if len(members) == 1:
        return members[0], True
    return annotation, False


def coerce_scalar(annotation: Any, value: object) -> object:
    """Coerce one JSON value to `annotation` (int, float, bool or str)."""

    if value is None:
        return None
    target, _ = normalize_optional(annotation)
    if target in (int, float):
        # bool is an int subclass; True is never a pid or a duration.
        if isinstance(value, bool):
            raise TypeError(f"Expected {target.__name__}, got {value!r}")
        return target(cast("Any", value))
    if target is bool:
        if isinstance(value, bool):
            return value
        word = str(value).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise TypeError(f"Expected boolean, got {value!r}")
    if target is str:
        return str(value)
    return value


def _coerce_field(annotation: Any, value: object) -> object:
    if get_origin(annotation) is not tuple:
        return coerce_scalar(annotation, value)
    item_type = get_args(annotation)[0]
    # A lone pid is accepted where a list of pids is expected.
    items = value if isinstance(value, list | tuple) else [value]
    return tuple(coerce_scalar(item_type, item) for item in cast("list[object]", items))


def _field_default(field: Field[Any]) -> object:
    if field.default is not MISSING:
        return field.default
    if field.default_factory is not MISSING:
        return field.default_factory()
    return inspect.Parameter.empty


def coerce_input_payload(payload_type: type[PayloadT], raw_input: object) -> PayloadT:
    """Build `payload_type` from a tool-call argument mapping.

    Unknown keys are ignored; missing keys fall back to the dataclass defaults.
    """

    if raw_input is None:
        raw_input = {}
    if not isinstance(raw_input, Mapping):
        raise TypeError(f"Tool input must be an object, got {type(raw_input).__name__}")
    if not is_dataclass(payload_type):
        raise TypeError(f"{payload_type!r} is not an input dataclass")

    arguments = cast("Mapping[str, object]", raw_input)
    hints = get_type_hints(payload_type)
    kwargs: dict[str, object] = {}
    for field in fields(payload_type):
        if field.name in arguments:
            kwargs[field.name] = _coerce_field(hints[field.name], arguments[field.name])
        elif _field_default(field) is inspect.Parameter.empty:
            raise TypeError(f"Missing required field '{field.name}'")
    return cast("PayloadT", payload_type(**kwargs))


def signature_from_dataclass(payload_type: type[object]) -> inspect.Signature:
    """Keyword-only signature mirroring the input fields, for FastMCP's schema."""

    hints = get_type_hints(payload_type)
    return inspect.Signature(
        parameters=[
            inspect.Parameter(
                name=field.name,
                kind=inspect.Parameter.KEYWORD_ONLY,
                default=_field_default(field),
                annotation=hints[field.name],
            )
            for field in fields(cast("Any", payload_type))
        ]
    )
