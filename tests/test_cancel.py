"""Cancellation token and signal routing tests."""

from __future__ import annotations

import os
import signal
import threading
import time

from conftest import IGNORES_SIGTERM

from gracekill.lib.kill.cancel import CancelToken, cancel_on_signals, signal_to_exit_code
from gracekill.lib.kill.supervisor import GraceSupervisor, TargetFate


def test_signal_to_exit_code_mapping() -> None:
    assert signal_to_exit_code(signal.SIGINT) == 130
    assert signal_to_exit_code(signal.SIGTERM) == 143
    assert signal_to_exit_code(None) is None


def test_token_remembers_first_signal_only() -> None:
    token = CancelToken()

    token.cancel(signal.SIGTERM)
    token.cancel(signal.SIGINT)

    assert token.is_set()
    assert token.received_signal == signal.SIGTERM
    assert token.exit_code == 143


def test_cancelled_token_does_not_sleep() -> None:
    token = CancelToken()
    token.cancel()

    started = time.monotonic()
    assert token.wait(30.0)
    assert time.monotonic() - started < 1.0


def test_cancel_on_signals_routes_and_restores_handlers() -> None:
    before = signal.getsignal(signal.SIGINT)
    token = CancelToken()

    with cancel_on_signals(token, (signal.SIGINT,)):
        os.kill(os.getpid(), signal.SIGINT)
        # Python runs signal handlers between bytecodes on the main thread.
        for _ in range(100):
            if token.is_set():
                break
            time.sleep(0.01)

    assert token.received_signal == signal.SIGINT
    assert signal.getsignal(signal.SIGINT) is before


def test_cancel_on_signals_is_inert_off_main_thread() -> None:
    token = CancelToken()
    errors: list[ValueError] = []

    def _worker() -> None:
        try:
            with cancel_on_signals(token):
                pass
        except ValueError as exc:
            errors.append(exc)

    thread = threading.Thread(target=_worker)
    thread.start()
    thread.join(timeout=5)

    assert errors == []
    assert not token.is_set()


def test_cancel_from_another_thread_aborts_run(spawn_child) -> None:
    child = spawn_child(IGNORES_SIGTERM)
    token = CancelToken()
    timer = threading.Timer(0.3, token.cancel)
    timer.start()
    try:
        result = GraceSupervisor(
            poll_interval_seconds=0.05,
            cancel_event=token,
            sink=lambda event, **fields: None,
        ).run([child.pid], grace_seconds=30.0)
    finally:
        timer.cancel()

    assert result.aborted
    assert result.targets[0].fate == TargetFate.RUNNING
    assert result.elapsed_seconds < 5.0
    assert child.poll() is None
