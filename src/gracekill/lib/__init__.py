"""Core gracekill library exports."""

from gracekill.lib.kill.signals import DispatchOutcome, DispatchStatus, SignalKind
from gracekill.lib.kill.supervisor import (
    EscalationPolicy,
    GraceSupervisor,
    NoTargetsError,
    RunResult,
    TargetFate,
    terminate,
)
from gracekill.lib.types import Pid

__all__ = [
    "DispatchOutcome",
    "DispatchStatus",
    "EscalationPolicy",
    "GraceSupervisor",
    "NoTargetsError",
    "Pid",
    "RunResult",
    "SignalKind",
    "TargetFate",
    "terminate",
]
