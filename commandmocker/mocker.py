"""Module-level helpers over the process-wide :class:`MockerContext`."""

from __future__ import annotations

import contextlib
import dataclasses as dc
import typing as t
from pathlib import Path

from . import inspector
from .context import MockerContext, default_context

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import os


def register(
    name: str,
    stdout: str = "",
    stderr: str = "",
    exit_status: int = 0,
    *,
    timeout: float | None = None,
) -> str:
    """Create a fake *name* on ``PATH`` and return its directory."""
    return default_context().register(
        name, stdout, stderr, exit_status, timeout=timeout
    )


def add(name: str, output: str) -> str:
    """Fake *name* so that it prints *output* and exits successfully."""
    return register(name, stdout=output)


def add_stderr(name: str, stdout: str, stderr: str) -> str:
    """Like :func:`add`, with separate text for both streams."""
    return register(name, stdout=stdout, stderr=stderr)


def error(name: str, output: str, status: int) -> str:
    """Fake *name* so that it prints *output* on stderr and exits with *status*."""
    return register(name, stderr=output, exit_status=status)


def remove(directory: os.PathLike[str] | str) -> None:
    """Undo :func:`register`: drop *directory* from ``PATH`` and delete it."""
    default_context().unregister(directory)


@dc.dataclass(frozen=True, slots=True)
class MockCommand:
    """Handle on a live mock, exposing what it has recorded so far."""

    name: str
    directory: Path

    @property
    def executable(self) -> Path:
        """Return the path of the generated script."""
        return self.directory / self.name

    @property
    def ran(self) -> bool:
        return inspector.has_run(self.directory)

    @property
    def output(self) -> str:
        return inspector.captured_output(self.directory)

    @property
    def error_output(self) -> str:
        return inspector.captured_error(self.directory)

    @property
    def parameters(self) -> list[str]:
        return inspector.captured_parameters(self.directory)

    @property
    def environment(self) -> str:
        return inspector.captured_environment(self.directory)

    def invocation(self) -> inspector.CapturedInvocation:
        """Return a snapshot of every recorded artifact."""
        return inspector.read_invocation(self.directory)


@contextlib.contextmanager
def mock_command(
    name: str,
    stdout: str = "",
    stderr: str = "",
    exit_status: int = 0,
    *,
    timeout: float | None = None,
    context: MockerContext | None = None,
) -> t.Iterator[MockCommand]:
    """Keep a fake *name* on ``PATH`` for the duration of the block."""
    ctx = default_context() if context is None else context
    directory = ctx.register(name, stdout, stderr, exit_status, timeout=timeout)
    try:
        yield MockCommand(name=name, directory=Path(directory))
    finally:
        ctx.unregister(directory)


__all__ = [
    "MockCommand",
    "add",
    "add_stderr",
    "error",
    "mock_command",
    "register",
    "remove",
]
