"""Interrupting a supervisor run from process signals."""

from __future__ import annotations

import signal
import time
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType
from typing import Final, cast

CANCEL_SIGNALS: Final[tuple[signal.Signals, ...]] = (signal.SIGINT, signal.SIGTERM)


def signal_to_exit_code(received_signal: signal.Signals | None) -> int | None:
    """Map the interrupting signal to the conventional shell exit code."""

    if received_signal == signal.SIGINT:
        return 130
    if received_signal == signal.SIGTERM:
        return 143
    return None


class CancelToken:
    """Cancellation flag usable as the supervisor's tick waiter.

    A plain flag keeps `cancel()` safe to call from a signal handler; the
    cost is that a pending sleep finishes its current tick before noticing.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self.received_signal: signal.Signals | None = None

    def cancel(self, signum: signal.Signals | None = None) -> None:
        if not self._cancelled:
            self.received_signal = signum
        self._cancelled = True

    def is_set(self) -> bool:
        return self._cancelled

    def wait(self, timeout: float | None = None) -> bool:
        if not self._cancelled and timeout is not None and timeout > 0:
            time.sleep(timeout)
        return self._cancelled

    @property
    def exit_code(self) -> int | None:
        return signal_to_exit_code(self.received_signal)


@contextmanager
def cancel_on_signals(
    token: CancelToken,
    signals: tuple[signal.Signals, ...] = CANCEL_SIGNALS,
) -> Iterator[CancelToken]:
    """Route `signals` into `token` for the duration of the block.

    Handlers can only be installed from the main thread; elsewhere the block
    runs without them and cancellation stays with the caller.
    """

    previous: dict[signal.Signals, signal.Handlers] = {}

    def _on_signal(raw_signum: int, frame: FrameType | None) -> None:
        _ = frame
        token.cancel(signal.Signals(raw_signum))

    try:
        for signum in signals:
            handler = cast("signal.Handlers", signal.getsignal(signum))
            signal.signal(signum, _on_signal)
            previous[signum] = handler
    except ValueError:
        # Not the main thread.
        for signum, handler in previous.items():
            signal.signal(signum, handler)
        previous.clear()

    try:
        yield token
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
