"""Render operation results as text, JSON, or porcelain lines on stdout."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias, cast

from gracekill.lib.formatting import FormatContext, TextFormattable
from gracekill.lib.serialization import to_jsonable

OutputFormat = Literal["text", "json", "porcelain"]
JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]

OUTPUT_FORMATS: tuple[OutputFormat, ...] = ("text", "json", "porcelain")


@dataclass(frozen=True, slots=True)
class OutputConfig:
    format: OutputFormat
    verbosity: int = 1


def normalize_output_format(
    *,
    requested: str | None,
    json_mode: bool,
    porcelain_mode: bool,
) -> OutputFormat:
    """Pick the output format; `--json`/`--porcelain` win over `--format`."""

    if json_mode:
        return "json"
    if porcelain_mode:
        return "porcelain"
    if not requested:
        return "text"

    normalized = requested.strip().lower()
    if normalized in OUTPUT_FORMATS:
        return cast("OutputFormat", normalized)
    raise SystemExit(f"--format must be one of: {', '.join(OUTPUT_FORMATS)}")


def _porcelain_value(value: JSONValue) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict | list):
        return json.dumps(value, sort_keys=True)
    return str(value)


def _porcelain_line(payload: JSONObject) -> str:
    return "\t".join(f"{key}={_porcelain_value(payload[key])}" for key in sorted(payload))


def _is_row_list(value: JSONValue) -> bool:
    return isinstance(value, list) and all(isinstance(item, dict) for item in value)


def porcelain_lines(value: Any) -> list[str]:
    """One `key=value` line per pid row, then one line of run-level fields.

    A result such as `RunResult` or `ProbeOutput` carries its per-pid rows in a
    list field (`targets`, `results`); those become their own lines so callers
    can `grep` or `cut` by pid.
    """

    payload = cast("JSONValue", to_jsonable(value))
    if isinstance(payload, list):
        return [
            _porcelain_line(item) if isinstance(item, dict) else _porcelain_value(item)
            for item in payload
        ]
    if not isinstance(payload, dict):
        return [_porcelain_value(payload)]

    lines: list[str] = []
    run_fields: JSONObject = {}
    for key, item in payload.items():
        if item and _is_row_list(item):
            lines.extend(_porcelain_line(cast("JSONObject", row)) for row in cast("list", item))
        else:
            run_fields[key] = item
    if run_fields:
        lines.append(_porcelain_line(run_fields))
    return lines


def emit(value: Any, config: OutputConfig) -> None:
    """Print one result in the configured output format."""

    if config.format == "json":
        print(json.dumps(to_jsonable(value), sort_keys=True))
    elif config.format == "porcelain":
        for line in porcelain_lines(value):
            print(line)
    elif isinstance(value, TextFormattable):
        print(value.format_text(FormatContext(verbosity=config.verbosity)))
    else:
        print(json.dumps(to_jsonable(value), sort_keys=True, indent=2))
