"""Stable domain identifier newtypes."""

from typing import NewType

Pid = NewType("Pid", int)
