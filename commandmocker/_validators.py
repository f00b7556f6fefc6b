"""Shared validation helpers."""

from __future__ import annotations

import math
import os
import typing as t

from .scriptgen import ARTIFACT_NAMES

MAX_EXIT_STATUS: t.Final[int] = 255


def validate_positive_finite_timeout(timeout: float) -> None:
    """Ensure *timeout* represents a usable registration timeout value."""
    if isinstance(timeout, bool):
        msg = "timeout must be a real number"
        raise TypeError(msg)

    if not (timeout > 0 and math.isfinite(timeout)):
        msg = "timeout must be > 0 and finite"
        raise ValueError(msg)


def validate_exit_status(status: int) -> None:
    """Ensure *status* is an exit code a POSIX shell can report verbatim."""
    if isinstance(status, bool) or not isinstance(status, int):
        msg = f"exit status must be an int, got {type(status).__name__}"
        raise TypeError(msg)
    if not 0 <= status <= MAX_EXIT_STATUS:
        msg = f"exit status must be between 0 and {MAX_EXIT_STATUS}, got {status}"
        raise ValueError(msg)


def _validate_not_empty(name: str, error_msg: str) -> None:
    """Raise ``ValueError`` if *name* is empty."""
    if not name:
        raise ValueError(error_msg)


def _validate_not_dot_directories(name: str, error_msg: str) -> None:
    """Disallow ``.`` and ``..`` which change directory semantics."""
    if name in {".", ".."}:
        raise ValueError(error_msg)


def _validate_no_path_separators(name: str, error_msg: str) -> None:
    """Ensure *name* is a bare filename."""
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators):
        raise ValueError(error_msg)


def _validate_no_nul_bytes(name: str, error_msg: str) -> None:
    """Reject names containing NUL bytes to avoid truncation."""
    if "\x00" in name:
        raise ValueError(error_msg)


def _validate_not_artifact_name(name: str, error_msg: str) -> None:
    """Reject names that would clash with the invocation log files."""
    if name in ARTIFACT_NAMES:
        raise ValueError(error_msg)


def validate_command_name(name: str) -> None:
    """Validate *name* is usable as an executable filename."""
    error_msg = f"Invalid command name: {name!r}"

    validators: list[t.Callable[[str, str], None]] = [
        _validate_not_empty,
        _validate_not_dot_directories,
        _validate_no_path_separators,
        _validate_no_nul_bytes,
        _validate_not_artifact_name,
    ]
    for validator in validators:
        validator(name, error_msg)
