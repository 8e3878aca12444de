"""Config inspection operation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from gracekill.lib.config.settings import load_config, resolve_config_path
from gracekill.lib.ops.registry import CLI_ONLY, OperationSpec, operation

if TYPE_CHECKING:
    from gracekill.lib.formatting import FormatContext


@dataclass(frozen=True, slots=True)
class ConfigShowInput:
    config_path: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigShowOutput:
    path: str
    exists: bool
    grace_seconds: float
    poll_interval_seconds: float
    escalation_is_failure: bool

    def format_text(self, ctx: FormatContext | None = None) -> str:
        from gracekill.cli.format_helpers import kv_block

        _ = ctx
        return kv_block(
            [
                ("path", self.path if self.exists else f"{self.path} (not found)"),
                ("grace_seconds", f"{self.grace_seconds:g}"),
                ("poll_interval_seconds", f"{self.poll_interval_seconds:g}"),
                ("escalation_is_failure", str(self.escalation_is_failure).lower()),
            ]
        )


def config_show_sync(payload: ConfigShowInput) -> ConfigShowOutput:
    path = (
        Path(payload.config_path).expanduser()
        if payload.config_path
        else resolve_config_path()
    )
    config = load_config(path if payload.config_path else None)
    return ConfigShowOutput(
        path=path.as_posix(),
        exists=path.is_file(),
        grace_seconds=config.grace_seconds,
        poll_interval_seconds=config.poll_interval_seconds,
        escalation_is_failure=config.escalation_is_failure,
    )


async def config_show(payload: ConfigShowInput) -> ConfigShowOutput:
    return await asyncio.to_thread(config_show_sync, payload)


operation(
    OperationSpec(
        name="config.show",
        handler=config_show,
        sync_handler=config_show_sync,
        input_type=ConfigShowInput,
        output_type=ConfigShowOutput,
        description="Show resolved gracekill settings and the config file they came from.",
        surfaces=CLI_ONLY,
    )
)
