"""CLI command handlers for the kill and probe operations."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Annotated, Any

from cyclopts import App, Parameter

from gracekill.cli.registration import Registered, register_operation_commands
from gracekill.lib.kill.cancel import CancelToken, cancel_on_signals
from gracekill.lib.kill.targets import parse_targets
from gracekill.lib.ops.kill import KillInput, kill_sync
from gracekill.lib.ops.probe import ProbeInput, probe_sync

Emitter = Callable[[Any], None]


def _kill(
    emit: Emitter,
    *pids: str,
    grace_seconds: Annotated[
        float | None,
        Parameter(
            name=["--grace-seconds", "-g"],
            help="Grace period in seconds before SIGKILL (default from config: 30).",
        ),
    ] = None,
    poll_interval: Annotated[
        float | None,
        Parameter(name="--poll-interval", help="Seconds between liveness checks."),
    ] = None,
    escalation_is_failure: Annotated[
        bool | None,
        Parameter(
            name="--escalation-is-failure",
            help="Exit with status 3 when any process had to be killed with SIGKILL.",
        ),
    ] = None,
    config: Annotated[
        str | None,
        Parameter(name="--config", help="Path to a gracekill config.toml."),
    ] = None,
) -> None:
    """Terminate PIDs (comma or space separated), escalating after the grace period."""

    token = CancelToken()
    payload = KillInput(
        pids=tuple(parse_targets(pids)),
        grace_seconds=grace_seconds,
        poll_interval_seconds=poll_interval,
        escalation_is_failure=escalation_is_failure,
        config_path=config,
    )
    with cancel_on_signals(token):
        result = kill_sync(payload, cancel_event=token)
    emit(result)
    if result.aborted:
        raise SystemExit(token.exit_code or 130)
    if result.exit_status != 0:
        raise SystemExit(result.exit_status)


def _probe(emit: Emitter, *pids: str) -> None:
    emit(probe_sync(ProbeInput(pids=tuple(parse_targets(pids)))))


def register_kill_commands(app: App, emit: Emitter) -> Registered:
    kill_cmd = partial(_kill, emit)
    probe_cmd = partial(_probe, emit)
    registered = register_operation_commands(app, "", {"kill": kill_cmd, "probe": probe_cmd})

    # Bare `gracekill PID...` behaves like `gracekill kill PID...`.
    app.default(kill_cmd)
    return registered
