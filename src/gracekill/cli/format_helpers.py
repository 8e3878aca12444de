"""Column and key/value layout shared by the `format_text()` renderers."""

from __future__ import annotations

from collections.abc import Sequence


def tabular(rows: Sequence[Sequence[str]], sep: str = "  ") -> str:
    """Left-align each column to its widest cell; short rows are padded.

    >>> tabular([["101", "exited"], ["2048", "forced", ""]])
    '101   exited\\n2048  forced'
    """
    widths: list[int] = []
    for row in rows:
        for index, cell in enumerate(row):
            if index == len(widths):
                widths.append(0)
            widths[index] = max(widths[index], len(cell))

    lines = []
    for row in rows:
        padded = list(row) + [""] * (len(widths) - len(row))
        line = sep.join(cell.ljust(width) for cell, width in zip(padded, widths, strict=True))
        lines.append(line.rstrip())
    return "\n".join(lines)


def kv_block(pairs: Sequence[tuple[str, str | None]]) -> str:
    """One `key: value` line per pair whose value is not None.

    >>> kv_block([("targets", "2"), ("forced", "1"), ("aborted", None)])
    'targets: 2\\nforced: 1'
    """
    return "\n".join(f"{key}: {value}" for key, value in pairs if value is not None)
