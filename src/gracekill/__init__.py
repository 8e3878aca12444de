"""Graceful process termination with bounded escalation to SIGKILL."""

__version__ = "0.1.0"
