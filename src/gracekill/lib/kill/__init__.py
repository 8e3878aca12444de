"""Termination primitives: signal dispatch, supervision, cancellation."""

from gracekill.lib.kill.cancel import CancelToken, cancel_on_signals, signal_to_exit_code
from gracekill.lib.kill.signals import (
    MAX_PID,
    DispatchOutcome,
    DispatchStatus,
    SignalKind,
    dispatch,
    is_alive,
    probe,
    send_signal,
    validate_target,
)
from gracekill.lib.kill.supervisor import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    EscalationPolicy,
    GraceSupervisor,
    NoTargetsError,
    RunResult,
    TargetFate,
    TargetReport,
    terminate,
)
from gracekill.lib.kill.targets import parse_targets

__all__ = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "MAX_PID",
    "CancelToken",
    "DispatchOutcome",
    "DispatchStatus",
    "EscalationPolicy",
    "GraceSupervisor",
    "NoTargetsError",
    "RunResult",
    "SignalKind",
    "TargetFate",
    "TargetReport",
    "cancel_on_signals",
    "dispatch",
    "is_alive",
    "parse_targets",
    "probe",
    "send_signal",
    "signal_to_exit_code",
    "terminate",
    "validate_target",
]
