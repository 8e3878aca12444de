"""Cyclopts CLI entry point for gracekill."""

from __future__ import annotations

import sys
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, NoReturn

from cyclopts import App

from gracekill import __version__
from gracekill.cli.config_cmd import register_config_commands
from gracekill.cli.kill_cmd import register_kill_commands
from gracekill.cli.output import OutputConfig, normalize_output_format
from gracekill.cli.output import emit as emit_output
from gracekill.lib.kill.supervisor import NoTargetsError

if TYPE_CHECKING:
    from collections.abc import Sequence

_USAGE = "usage: gracekill [options] <pid>[,pid...] [<pid>...]"


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Top-level options that apply to all commands."""

    output: OutputConfig
    verbosity: int = 1


_GLOBAL_OPTIONS: ContextVar[GlobalOptions | None] = ContextVar("_GLOBAL_OPTIONS", default=None)


def get_global_options() -> GlobalOptions:
    """Return parsed global options for current command."""

    default = GlobalOptions(output=OutputConfig(format="text"))
    return _GLOBAL_OPTIONS.get() or default


def emit(payload: object) -> None:
    """Write command output using current output format settings."""

    emit_output(payload, get_global_options().output)


_FORMAT_FLAGS = {"--json": "json", "--porcelain": "porcelain"}


def _extract_global_options(argv: Sequence[str]) -> tuple[list[str], GlobalOptions]:
    """Pull output and verbosity flags out of `argv`, wherever they appear.

    Everything after `--` is passed through untouched.
    """

    forced: set[str] = set()
    requested: str | None = None
    # Lifecycle lines are shown by default; -q hides them, -v adds debug.
    verbosity = 1
    cleaned: list[str] = []

    args = iter(argv)
    for arg in args:
        if arg == "--":
            cleaned.append(arg)
            cleaned.extend(args)
            break
        if arg in _FORMAT_FLAGS:
            forced.add(_FORMAT_FLAGS[arg])
        elif arg == "--format":
            requested = next(args, None)
            if requested is None:
                raise SystemExit("--format requires a value")
        elif arg.startswith("--format="):
            requested = arg.removeprefix("--format=")
        elif arg in {"-v", "--verbose"}:
            verbosity += 1
        elif arg in {"-q", "--quiet"}:
            verbosity = 0
        else:
            cleaned.append(arg)

    resolved = normalize_output_format(
        requested=requested,
        json_mode="json" in forced,
        porcelain_mode="porcelain" in forced,
    )
    output = OutputConfig(format=resolved, verbosity=verbosity)
    return cleaned, GlobalOptions(output=output, verbosity=verbosity)


app = App(
    name="gracekill",
    help=(
        "Send SIGTERM to processes, wait for them to exit, and SIGKILL any that "
        "outlive the grace period."
    ),
    version=__version__,
    help_formatter="plain",
)

config_app = App(name="config", help="Configuration commands", help_formatter="plain")
app.command(config_app, name="config")


@app.command(name="serve")
def serve() -> None:
    """Start FastMCP server on stdio."""

    from gracekill.server.main import run_server

    run_server()


# Operation name -> help text for every command built from the registry.
_CLI_OPERATIONS: dict[str, str] = {}


def _register_operation_commands() -> None:
    for _, descriptions in (
        register_kill_commands(app, emit),
        register_config_commands(config_app, emit),
    ):
        _CLI_OPERATIONS.update(descriptions)


def get_registered_cli_commands() -> set[str]:
    return set(_CLI_OPERATIONS)


def get_registered_cli_descriptions() -> dict[str, str]:
    return dict(_CLI_OPERATIONS)


def _fail(exc: Exception, *, show_usage: bool = False) -> NoReturn:
    # KeyError's str() wraps the message in quotes.
    message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc).strip()
    print(f"error: {message or type(exc).__name__}", file=sys.stderr)
    if show_usage:
        print(_USAGE, file=sys.stderr)
    raise SystemExit(1) from None


def main(argv: Sequence[str] | None = None) -> None:
    """Run the CLI; `gracekill` and `python -m gracekill` both land here.

    Argument, configuration and OS errors print `error: ...` and exit 1. A kill
    run exits with its own status (0, 2, 3, or 130/143 when interrupted).
    """

    from gracekill.lib.logging import configure_logging

    cleaned_args, options = _extract_global_options(sys.argv[1:] if argv is None else argv)
    configure_logging(
        json_mode=options.output.format == "json",
        verbosity=options.verbosity,
    )

    token = _GLOBAL_OPTIONS.set(options)
    try:
        app(cleaned_args)
    except NoTargetsError as exc:
        _fail(exc, show_usage=True)
    except (KeyError, ValueError, OSError) as exc:
        _fail(exc)
    finally:
        _GLOBAL_OPTIONS.reset(token)


_register_operation_commands()
