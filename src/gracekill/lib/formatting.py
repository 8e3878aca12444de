"""Text rendering protocol for result dataclasses.

Kept in lib so result types can implement it without importing the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class FormatContext:
    # 0 under -q; renderers may drop per-pid detail.
    verbosity: int = 1


@runtime_checkable
class TextFormattable(Protocol):
    def format_text(self, ctx: FormatContext | None = None) -> str: ...
