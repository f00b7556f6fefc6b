"""Check that the host can run mock executables.

Mocks are ``/bin/sh`` scripts published through a colon-separated ``PATH``.
"""

from __future__ import annotations

import os
import typing as t

SHELL: t.Final[str] = "/bin/sh"
PATH_SEPARATOR: t.Final[str] = ":"


def unsupported_reason(
    *, shell: str = SHELL, pathsep: str | None = None
) -> str | None:
    """Return why mocks cannot run here, or ``None`` when they can."""
    separator = os.pathsep if pathsep is None else pathsep
    if separator != PATH_SEPARATOR:
        return f"commandmocker needs a {PATH_SEPARATOR!r}-separated PATH"
    if not (os.path.isfile(shell) and os.access(shell, os.X_OK)):
        return f"commandmocker needs an executable {shell}"
    return None


def is_supported() -> bool:
    """Return ``True`` when mocks can run on this host."""
    return unsupported_reason() is None


__all__ = ["SHELL", "is_supported", "unsupported_reason"]
