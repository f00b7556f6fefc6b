"""Global test configuration and shared fixtures."""

from __future__ import annotations

import os
import subprocess
import typing as t

import pytest

import commandmocker.context
from commandmocker.platform import unsupported_reason

pytest_plugins = ("commandmocker.pytest_plugin", "pytester")


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "posix_shell: mark test as executing generated /bin/sh scripts",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip tests that run generated scripts on unsupported platforms."""
    reason = unsupported_reason()
    if reason is None:
        return
    skip = pytest.mark.skip(reason=reason)
    for item in items:
        if "posix_shell" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def reset_default_context(
    monkeypatch: pytest.MonkeyPatch,
) -> t.Generator[None, None, None]:
    """Give every test a fresh process-wide context and restore ``PATH``."""
    # Recorded through monkeypatch so PATH is put back after the reset below.
    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))
    commandmocker.context.reset_default_context()
    yield
    commandmocker.context.reset_default_context()


@pytest.fixture
def run() -> t.Callable[..., subprocess.CompletedProcess[str]]:
    """Return a helper that runs a command and captures its text output."""

    def _run(
        args: t.Sequence[str], **kwargs: t.Any
    ) -> subprocess.CompletedProcess[str]:
        kwargs.setdefault("capture_output", True)
        kwargs.setdefault("text", True)
        kwargs.setdefault("check", False)
        return subprocess.run(args, **kwargs)  # noqa: S603 - test helper

    return _run
