"""Target list parsing for command-line and tool inputs."""

from __future__ import annotations

from collections.abc import Iterable


def _parse_one(raw: str) -> int:
    token = raw.strip()
    if not token.isascii() or not token.isdigit():
        raise ValueError(f"Invalid PID: '{raw}'")
    return int(token)


def parse_targets(tokens: Iterable[str]) -> list[int]:
    """Parse pid tokens, each either one pid or a comma-separated list.

    Order and duplicates are preserved. Zero and oversized values are kept so
    dispatch can report them per target instead of failing the whole run.
    """

    pids: list[int] = []
    for token in tokens:
        if "," in token:
            pids.extend(_parse_one(piece) for piece in token.split(","))
            continue
        pids.append(_parse_one(token))
    return pids
