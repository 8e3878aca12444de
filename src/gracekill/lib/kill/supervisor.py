"""Grace-period supervisor: cooperative stop, bounded wait, selective escalation."""

from __future__ import annotations

import math
import os
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from gracekill.lib.kill.signals import (
    DispatchOutcome,
    KillFn,
    SignalKind,
    dispatch,
    is_alive,
    probe,
    signal_label,
)
from gracekill.lib.logging import EventSink, structlog_sink
from gracekill.lib.types import Pid

if TYPE_CHECKING:
    from gracekill.lib.formatting import FormatContext

DEFAULT_POLL_INTERVAL_SECONDS = 0.1


class NoTargetsError(ValueError):
    """Raised before any dispatch when a run is started without targets."""

    def __init__(self) -> None:
        super().__init__("No PIDs provided")


class EscalationPolicy(StrEnum):
    EXPECTED = "expected"
    FAILURE = "failure"


class TargetFate(StrEnum):
    EXITED = "exited"
    FORCED = "forced"
    UNSIGNALABLE = "unsignalable"
    ESCALATION_FAILED = "escalation_failed"
    RUNNING = "running"


class Waiter(Protocol):
    """Minimal `threading.Event` surface used to sleep between poll ticks."""

    def is_set(self) -> bool: ...

    def wait(self, timeout: float | None = None) -> bool: ...


@dataclass(frozen=True, slots=True)
class TargetReport:
    pid: Pid
    fate: TargetFate
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class RunResult:
    """Summary of one orchestration run."""

    targets: tuple[TargetReport, ...]
    grace_seconds: float
    elapsed_seconds: float
    escalated: bool = False
    aborted: bool = False
    escalation_policy: EscalationPolicy = EscalationPolicy.EXPECTED

    def _count(self, fate: TargetFate) -> int:
        return sum(1 for report in self.targets if report.fate == fate)

    @property
    def cooperative_count(self) -> int:
        return self._count(TargetFate.EXITED)

    @property
    def forced_count(self) -> int:
        return self._count(TargetFate.FORCED)

    @property
    def unsignalable_count(self) -> int:
        return self._count(TargetFate.UNSIGNALABLE)

    @property
    def escalation_failed_count(self) -> int:
        return self._count(TargetFate.ESCALATION_FAILED)

    @property
    def running_count(self) -> int:
        return self._count(TargetFate.RUNNING)

    @property
    def exit_status(self) -> int:
        """0 on success, 2 when nothing was signalable, 3 on escalation-as-failure."""

        if self.targets and self.unsignalable_count == len(self.targets):
            return 2
        if self.escalated and self.escalation_policy == EscalationPolicy.FAILURE:
            return 3
        return 0

    def summary(self) -> dict[str, int]:
        return {
            "exited_count": self.cooperative_count,
            "forced_count": self.forced_count,
            "unsignalable_count": self.unsignalable_count,
            "escalation_failed_count": self.escalation_failed_count,
            "running_count": self.running_count,
            "exit_status": self.exit_status,
        }

    def format_text(self, ctx: FormatContext | None = None) -> str:
        from gracekill.cli.format_helpers import kv_block, tabular

        summary = kv_block(
            [
                ("targets", str(len(self.targets))),
                ("exited", str(self.cooperative_count)),
                ("forced", str(self.forced_count)),
                ("unsignalable", str(self.unsignalable_count)),
                (
                    "escalation_failed",
                    str(self.escalation_failed_count) if self.escalation_failed_count else None,
                ),
                ("running", str(self.running_count) if self.aborted else None),
                ("elapsed", f"{self.elapsed_seconds:.1f}s"),
                ("aborted", "yes" if self.aborted else None),
            ]
        )
        if ctx is not None and ctx.verbosity <= 0:
            return summary
        rows = [
            [str(report.pid), report.fate.value, report.detail or ""]
            for report in self.targets
        ]
        return f"{summary}\n\n{tabular(rows)}"


@dataclass(slots=True)
class _Ledger:
    """Per-run bookkeeping, indexed by position in the target list."""

    pids: list[Pid]
    fates: list[TargetFate | None]
    details: list[str | None]

    @classmethod
    def for_targets(cls, targets: Sequence[int]) -> _Ledger:
        return cls(
            pids=[Pid(pid) for pid in targets],
            fates=[None] * len(targets),
            details=[None] * len(targets),
        )

    def record(self, slot: int, fate: TargetFate, detail: str | None = None) -> None:
        self.fates[slot] = fate
        self.details[slot] = detail

    def reports(self) -> tuple[TargetReport, ...]:
        return tuple(
            TargetReport(pid=pid, fate=fate or TargetFate.RUNNING, detail=detail)
            for pid, fate, detail in zip(self.pids, self.fates, self.details, strict=True)
        )


class GraceSupervisor:
    """Drive one batch of targets through cooperative stop and escalation.

    The machine tracks the whole batch: a single deadline applies to every
    survivor and escalation happens once, for whoever is left.
    """

    def __init__(
        self,
        *,
        kill: KillFn = os.kill,
        clock: Callable[[], float] = time.monotonic,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        cancel_event: Waiter | None = None,
        sink: EventSink | None = None,
    ) -> None:
        if not math.isfinite(poll_interval_seconds) or poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be finite and > 0.")
        self._kill = kill
        self._clock = clock
        self._poll_interval = poll_interval_seconds
        self._cancel_event: Waiter = (
            cancel_event if cancel_event is not None else threading.Event()
        )
        self._sink = sink if sink is not None else structlog_sink()

    def _log_dispatch(self, outcome: DispatchOutcome) -> None:
        label = signal_label(outcome.kind)
        if outcome.delivered:
            message = f"Sent {label} to PID {outcome.pid}"
        else:
            message = f"Failed to send {label} to PID {outcome.pid}: {outcome.describe()}"
        self._sink(message, pid=outcome.pid, signal=label, status=outcome.status.value)

    def _reap(self, ledger: _Ledger, survivors: list[int]) -> list[int]:
        """Probe every survivor once; return the slots that are still alive."""

        still_running: list[int] = []
        for slot in survivors:
            pid = ledger.pids[slot]
            if is_alive(probe(pid, kill=self._kill)):
                still_running.append(slot)
                continue
            ledger.record(slot, TargetFate.EXITED)
            self._sink(f"Process {pid} exited gracefully", pid=pid)
        return still_running

    def _wait_for_exit(
        self,
        ledger: _Ledger,
        survivors: list[int],
        deadline: float,
    ) -> tuple[list[int], bool]:
        """Poll until no survivor is left or the deadline passes.

        The boolean is False when the cancel event interrupted the wait.
        """

        while survivors:
            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            if self._cancel_event.wait(min(self._poll_interval, remaining)):
                return survivors, False
            survivors = self._reap(ledger, survivors)
        return survivors, True

    def run(
        self,
        targets: Sequence[int],
        grace_seconds: float,
        escalation_policy: EscalationPolicy = EscalationPolicy.EXPECTED,
    ) -> RunResult:
        """Terminate `targets`, escalating to SIGKILL after `grace_seconds`."""

        if not targets:
            raise NoTargetsError()
        # A NaN or infinite deadline would never expire and never escalate.
        if not math.isfinite(grace_seconds) or grace_seconds < 0:
            raise ValueError("grace_seconds must be finite and >= 0.")

        started = self._clock()
        deadline = started + grace_seconds
        ledger = _Ledger.for_targets(targets)

        def _finish(*, escalated: bool = False, aborted: bool = False) -> RunResult:
            return RunResult(
                targets=ledger.reports(),
                grace_seconds=grace_seconds,
                elapsed_seconds=max(0.0, self._clock() - started),
                escalated=escalated,
                aborted=aborted,
                escalation_policy=escalation_policy,
            )

        self._sink(
            f"Starting graceful kill for {len(ledger.pids)} process(es) "
            f"with {grace_seconds:g}s grace period",
            count=len(ledger.pids),
            grace_seconds=grace_seconds,
        )

        survivors: list[int] = []
        cooperative = dispatch(ledger.pids, SignalKind.COOPERATIVE, kill=self._kill)
        for slot, outcome in enumerate(cooperative):
            self._log_dispatch(outcome)
            if outcome.delivered:
                survivors.append(slot)
            else:
                ledger.record(slot, TargetFate.UNSIGNALABLE, outcome.describe())

        if not survivors:
            self._sink("No processes to wait for")
            return _finish()

        survivors, completed = self._wait_for_exit(ledger, survivors, deadline)
        if not completed:
            self._sink(
                f"Aborted with {len(survivors)} process(es) still running",
                count=len(survivors),
            )
            return _finish(aborted=True)

        # Targets can exit between the last tick and escalation.
        if survivors:
            survivors = self._reap(ledger, survivors)
        if not survivors:
            self._sink("All processes exited gracefully")
            return _finish()

        self._sink(
            f"{len(survivors)} process(es) still running after grace period, sending SIGKILL",
            count=len(survivors),
        )
        stragglers = [ledger.pids[slot] for slot in survivors]
        forceful = dispatch(stragglers, SignalKind.FORCEFUL, kill=self._kill)
        for slot, outcome in zip(survivors, forceful, strict=True):
            self._log_dispatch(outcome)
            if outcome.delivered:
                ledger.record(slot, TargetFate.FORCED)
            else:
                ledger.record(slot, TargetFate.ESCALATION_FAILED, outcome.describe())

        return _finish(escalated=True)


def terminate(
    targets: Sequence[int],
    *,
    grace_seconds: float,
    escalation_policy: EscalationPolicy = EscalationPolicy.EXPECTED,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    cancel_event: Waiter | None = None,
    sink: EventSink | None = None,
    kill: KillFn = os.kill,
) -> RunResult:
    """Run one supervisor over `targets` with the given settings."""

    supervisor = GraceSupervisor(
        kill=kill,
        poll_interval_seconds=poll_interval_seconds,
        cancel_event=cancel_event,
        sink=sink,
    )
    return supervisor.run(targets, grace_seconds, escalation_policy)
