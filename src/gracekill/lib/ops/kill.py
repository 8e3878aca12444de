"""Terminate operation: cooperative stop with bounded escalation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from gracekill.lib.kill.supervisor import (
    EscalationPolicy,
    GraceSupervisor,
    NoTargetsError,
    RunResult,
    Waiter,
)
from gracekill.lib.logging import EventSink
from gracekill.lib.ops._runtime import resolve_settings
from gracekill.lib.ops.registry import OperationSpec, operation


@dataclass(frozen=True, slots=True)
class KillInput:
    pids: tuple[int, ...] = ()
    grace_seconds: float | None = None
    poll_interval_seconds: float | None = None
    escalation_is_failure: bool | None = None
    config_path: str | None = None


def kill_sync(
    payload: KillInput,
    *,
    cancel_event: Waiter | None = None,
    sink: EventSink | None = None,
) -> RunResult:
    if not payload.pids:
        raise NoTargetsError()

    settings = resolve_settings(
        config_path=payload.config_path,
        grace_seconds=payload.grace_seconds,
        poll_interval_seconds=payload.poll_interval_seconds,
        escalation_is_failure=payload.escalation_is_failure,
    )
    policy = (
        EscalationPolicy.FAILURE if settings.escalation_is_failure else EscalationPolicy.EXPECTED
    )
    supervisor = GraceSupervisor(
        poll_interval_seconds=settings.poll_interval_seconds,
        cancel_event=cancel_event,
        sink=sink,
    )
    return supervisor.run(list(payload.pids), settings.grace_seconds, policy)


async def kill(payload: KillInput) -> RunResult:
    return await asyncio.to_thread(kill_sync, payload)


operation(
    OperationSpec(
        name="kill",
        handler=kill,
        sync_handler=kill_sync,
        input_type=KillInput,
        output_type=RunResult,
        description=(
            "Send SIGTERM to processes, wait out the grace period, then SIGKILL survivors."
        ),
    )
)
