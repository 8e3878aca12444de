"""Probe operation: report which pids still refer to live processes."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gracekill.lib.kill.signals import DispatchStatus, is_alive, probe
from gracekill.lib.kill.supervisor import NoTargetsError
from gracekill.lib.ops.registry import OperationSpec, operation

if TYPE_CHECKING:
    from gracekill.lib.formatting import FormatContext


@dataclass(frozen=True, slots=True)
class ProbeInput:
    pids: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True)
class ProbeReport:
    pid: int
    alive: bool
    status: DispatchStatus
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class ProbeOutput:
    results: tuple[ProbeReport, ...]

    def format_text(self, ctx: FormatContext | None = None) -> str:
        from gracekill.cli.format_helpers import tabular

        _ = ctx
        rows = [
            [
                str(report.pid),
                "alive" if report.alive else "gone",
                report.status.value,
                report.detail or "",
            ]
            for report in self.results
        ]
        return tabular(rows)


def probe_sync(payload: ProbeInput) -> ProbeOutput:
    if not payload.pids:
        raise NoTargetsError()

    reports: list[ProbeReport] = []
    for pid in payload.pids:
        outcome = probe(pid)
        reports.append(
            ProbeReport(
                pid=pid,
                alive=is_alive(outcome),
                status=outcome.status,
                detail=outcome.detail,
            )
        )
    return ProbeOutput(results=tuple(reports))


async def probe_pids(payload: ProbeInput) -> ProbeOutput:
    return probe_sync(payload)


operation(
    OperationSpec(
        name="probe",
        handler=probe_pids,
        sync_handler=probe_sync,
        input_type=ProbeInput,
        output_type=ProbeOutput,
        description="Check whether pids refer to live processes without signaling them.",
    )
)
