"""Signal dispatch and liveness probing for termination targets."""

from __future__ import annotations

import errno
import os
import signal
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from gracekill.lib.types import Pid

# pid_t is a signed 32-bit integer on every supported POSIX platform.
MAX_PID: Final[int] = 2**31 - 1

KillFn = Callable[[int, int], None]


class SignalKind(StrEnum):
    COOPERATIVE = "cooperative"
    FORCEFUL = "forceful"
    PROBE = "probe"


class DispatchStatus(StrEnum):
    DELIVERED = "delivered"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    INVALID_TARGET = "invalid_target"
    OTHER_FAILURE = "other_failure"


def signal_number(kind: SignalKind) -> int:
    """Map one signal kind to the platform signal number."""

    match kind:
        case SignalKind.COOPERATIVE:
            return int(signal.SIGTERM)
        case SignalKind.FORCEFUL:
            return int(signal.SIGKILL)
        case SignalKind.PROBE:
            return 0


def signal_label(kind: SignalKind) -> str:
    match kind:
        case SignalKind.COOPERATIVE:
            return "SIGTERM"
        case SignalKind.FORCEFUL:
            return "SIGKILL"
        case SignalKind.PROBE:
            return "signal 0"


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Result of one signal attempt against one target."""

    pid: Pid
    kind: SignalKind
    status: DispatchStatus
    detail: str | None = None

    @property
    def delivered(self) -> bool:
        return self.status == DispatchStatus.DELIVERED

    def describe(self) -> str:
        if self.status == DispatchStatus.DELIVERED:
            return "delivered"
        if self.status == DispatchStatus.NOT_FOUND:
            return "Process not found"
        if self.status == DispatchStatus.PERMISSION_DENIED:
            return "Permission denied"
        if self.status == DispatchStatus.INVALID_TARGET:
            return f"Invalid PID: {self.detail}"
        return f"Failed to send signal: {self.detail}"


def validate_target(pid: object) -> str | None:
    """Return why `pid` must never reach kill(2), or None when it is usable."""

    if isinstance(pid, bool) or not isinstance(pid, int):
        return f"expected integer pid, got {type(pid).__name__}"
    if pid == 0:
        return "pid 0 addresses the caller's process group"
    if pid < 0:
        return "negative pids address process groups"
    if pid > MAX_PID:
        return f"pid {pid} exceeds platform maximum {MAX_PID}"
    return None


def _classify_os_error(pid: Pid, kind: SignalKind, error: OSError) -> DispatchOutcome:
    if isinstance(error, ProcessLookupError) or error.errno == errno.ESRCH:
        return DispatchOutcome(pid=pid, kind=kind, status=DispatchStatus.NOT_FOUND)
    if isinstance(error, PermissionError) or error.errno == errno.EPERM:
        return DispatchOutcome(pid=pid, kind=kind, status=DispatchStatus.PERMISSION_DENIED)
    return DispatchOutcome(
        pid=pid,
        kind=kind,
        status=DispatchStatus.OTHER_FAILURE,
        detail=str(error) or error.__class__.__name__,
    )


def send_signal(pid: int, kind: SignalKind, *, kill: KillFn = os.kill) -> DispatchOutcome:
    """Attempt one signal delivery and classify the result.

    Expected failures are reported as outcomes; nothing here raises for a
    missing, foreign, or malformed target.
    """

    target = Pid(pid)
    reason = validate_target(pid)
    if reason is not None:
        return DispatchOutcome(
            pid=target,
            kind=kind,
            status=DispatchStatus.INVALID_TARGET,
            detail=reason,
        )

    try:
        kill(pid, signal_number(kind))
    except OSError as error:
        return _classify_os_error(target, kind, error)
    except OverflowError as error:
        return DispatchOutcome(
            pid=target,
            kind=kind,
            status=DispatchStatus.OTHER_FAILURE,
            detail=str(error),
        )
    return DispatchOutcome(pid=target, kind=kind, status=DispatchStatus.DELIVERED)


def dispatch(
    targets: Iterable[int],
    kind: SignalKind,
    *,
    kill: KillFn = os.kill,
) -> list[DispatchOutcome]:
    """Send `kind` to every target in order, one outcome per entry."""

    return [send_signal(pid, kind, kill=kill) for pid in targets]


def probe(pid: int, *, kill: KillFn = os.kill) -> DispatchOutcome:
    """Liveness probe: signal 0 through the same path as real dispatch."""

    return send_signal(pid, SignalKind.PROBE, kill=kill)


def is_alive(outcome: DispatchOutcome) -> bool:
    """Interpret a probe outcome.

    Permission denied still proves the pid refers to a live process.
    """

    return outcome.status not in {DispatchStatus.NOT_FOUND, DispatchStatus.INVALID_TARGET}
