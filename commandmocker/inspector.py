"""Read back what a mock executable recorded when it ran.

Missing log files are not errors: a mock that never ran has none, so each
accessor degrades to ``False``, ``""`` or ``[]``.
"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from .scriptgen import (
    ENVIRONMENT_LOG,
    ERROR_LOG,
    OUTPUT_LOG,
    PARAMETERS_LOG,
    RAN_MARKER,
)


@dc.dataclass(frozen=True, slots=True)
class CapturedInvocation:
    """Snapshot of every artifact in a mock directory."""

    ran: bool
    output: str
    error_output: str
    parameters: list[str]
    environment: str


def _read_text(directory: os.PathLike[str] | str, name: str) -> str:
    try:
        with (Path(directory) / name).open(
            encoding="utf-8", errors="surrogateescape", newline=""
        ) as fh:
            return fh.read()
    except FileNotFoundError:
        return ""


def has_run(directory: os.PathLike[str] | str) -> bool:
    """Return ``True`` when the mock in *directory* has been executed."""
    return (Path(directory) / RAN_MARKER).exists()


def captured_output(directory: os.PathLike[str] | str) -> str:
    """Return the stdout text written by the last run."""
    return _read_text(directory, OUTPUT_LOG)


def captured_error(directory: os.PathLike[str] | str) -> str:
    """Return the stderr text written by the last run."""
    return _read_text(directory, ERROR_LOG)


def captured_environment(directory: os.PathLike[str] | str) -> str:
    """Return the ``env`` dumps of every run, oldest first."""
    return _read_text(directory, ENVIRONMENT_LOG)


def captured_parameters(directory: os.PathLike[str] | str) -> list[str]:
    """Return the positional arguments the mock received, one per entry."""
    lines = _read_text(directory, PARAMETERS_LOG).split("\n")
    # Every entry is newline-terminated, leaving one empty tail.
    if lines[-1] == "":
        lines.pop()
    return lines


def read_invocation(directory: os.PathLike[str] | str) -> CapturedInvocation:
    """Collect all artifacts of *directory* into one snapshot."""
    return CapturedInvocation(
        ran=has_run(directory),
        output=captured_output(directory),
        error_output=captured_error(directory),
        parameters=captured_parameters(directory),
        environment=captured_environment(directory),
    )


__all__ = [
    "CapturedInvocation",
    "captured_environment",
    "captured_error",
    "captured_output",
    "captured_parameters",
    "has_run",
    "read_invocation",
]
