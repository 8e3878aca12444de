"""Shared pytest fixtures for CLI and process integration checks."""

from __future__ import annotations

import os
import subprocess
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

PACKAGE_ROOT = Path(__file__).resolve().parents[1]

# Children print a marker once their SIGTERM disposition is in place.
HONORS_SIGTERM = "import time; print('ready', flush=True); time.sleep(60)"
IGNORES_SIGTERM = (
    "import signal, time; "
    "signal.signal(signal.SIGTERM, signal.SIG_IGN); "
    "print('ready', flush=True); time.sleep(60)"
)
EXITS_SLOWLY = (
    "import signal, sys, time\n"
    "def _stop(signum, frame):\n"
    "    time.sleep(0.5)\n"
    "    sys.exit(0)\n"
    "signal.signal(signal.SIGTERM, _stop)\n"
    "print('ready', flush=True)\n"
    "time.sleep(60)\n"
)


@dataclass(frozen=True, slots=True)
class CliResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


@pytest.fixture
def package_root() -> Path:
    return PACKAGE_ROOT


@pytest.fixture
def cli_env(package_root: Path, tmp_path: Path) -> dict[str, str]:
    env = os.environ.copy()
    existing = env.get("PYTHONPATH", "")
    root = str(package_root / "src")
    env["PYTHONPATH"] = root if not existing else f"{root}:{existing}"
    # Keep the developer's own config out of CLI runs.
    env["GRACEKILL_CONFIG"] = str(tmp_path / "absent-config.toml")
    for name in (
        "GRACEKILL_GRACE_SECONDS",
        "GRACEKILL_POLL_INTERVAL_SECONDS",
        "GRACEKILL_ESCALATION_IS_FAILURE",
    ):
        env.pop(name, None)
    return env


@pytest.fixture
def run_gracekill(package_root: Path, cli_env: dict[str, str]) -> Callable[..., CliResult]:
    def _run(args: list[str], timeout: float = 30.0) -> CliResult:
        completed = subprocess.run(
            [sys.executable, "-m", "gracekill", *args],
            cwd=package_root,
            env=cli_env,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
            # pid 0 regressions must not be able to reach pytest's process group.
            start_new_session=True,
        )
        return CliResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    return _run


@pytest.fixture
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point config discovery at a temp path and clear env overrides."""

    config_path = tmp_path / "gracekill" / "config.toml"
    monkeypatch.setenv("GRACEKILL_CONFIG", str(config_path))
    for name in (
        "GRACEKILL_GRACE_SECONDS",
        "GRACEKILL_POLL_INTERVAL_SECONDS",
        "GRACEKILL_ESCALATION_IS_FAILURE",
    ):
        monkeypatch.delenv(name, raising=False)
    return config_path


@pytest.fixture
def spawn_child() -> Iterator[Callable[[str], subprocess.Popen[str]]]:
    """Start Python children that get reaped as soon as they exit.

    Without a reaper an exited child stays a zombie, which still answers
    kill(pid, 0) and would look alive to the supervisor.
    """

    children: list[subprocess.Popen[str]] = []

    def _spawn(script: str) -> subprocess.Popen[str]:
        process = subprocess.Popen(
            [sys.executable, "-c", script],
            stdout=subprocess.PIPE,
            text=True,
        )
        children.append(process)
        assert process.stdout is not None
        assert process.stdout.readline().strip() == "ready"
        threading.Thread(target=process.wait, daemon=True).start()
        return process

    yield _spawn

    for process in children:
        if process.poll() is None:
            process.kill()
        process.wait(timeout=5)
        if process.stdout is not None:
            process.stdout.close()


@pytest.fixture
def vanished_pid() -> int:
    """Return the pid of a process that has already exited and been reaped."""

    process = subprocess.Popen([sys.executable, "-c", "pass"])
    process.wait(timeout=10)
    return process.pid
