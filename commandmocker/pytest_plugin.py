"""Pytest plugin providing the ``command_mocker`` fixture."""

from __future__ import annotations

import logging
import typing as t
from pathlib import Path

import pytest

from ._validators import validate_positive_finite_timeout
from .context import MockerContext, default_context
from .mocker import MockCommand
from .platform import unsupported_reason

logger = logging.getLogger(__name__)

_TIMEOUT_OPTION = "commandmocker_register_timeout"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("commandmocker")
    group.addoption(
        "--commandmocker-register-timeout",
        action="store",
        dest=_TIMEOUT_OPTION,
        type=float,
        default=None,
        help=(
            "Seconds to wait for a command name that is already mocked before "
            "failing. Overrides the pytest.ini setting."
        ),
    )
    parser.addini(
        _TIMEOUT_OPTION,
        (
            "Seconds to wait for a command name that is already mocked; empty "
            "waits forever."
        ),
        default="",
    )


def _register_timeout(config: pytest.Config) -> float | None:
    """Return the configured registration timeout (CLI over ini)."""
    cli_value = config.getoption(_TIMEOUT_OPTION, default=None)
    if cli_value is not None:
        timeout = float(cli_value)
    else:
        raw = str(config.getini(_TIMEOUT_OPTION) or "").strip()
        if not raw:
            return None
        try:
            timeout = float(raw)
        except ValueError as exc:
            msg = f"{_TIMEOUT_OPTION} must be a number of seconds, got {raw!r}"
            raise pytest.UsageError(msg) from exc
    validate_positive_finite_timeout(timeout)
    return timeout


class CommandMocker:
    """Per-test facade that removes every mock it created on teardown."""

    def __init__(
        self, context: MockerContext, *, timeout: float | None = None
    ) -> None:
        self.context = context
        self.timeout = timeout
        self._mocks: list[MockCommand] = []

    @property
    def mocks(self) -> list[MockCommand]:
        """Return the mocks created through this fixture that are still live."""
        return list(self._mocks)

    def add(
        self,
        name: str,
        stdout: str = "",
        stderr: str = "",
        exit_status: int = 0,
    ) -> MockCommand:
        """Fake *name* for the rest of the test."""
        directory = self.context.register(
            name, stdout, stderr, exit_status, timeout=self.timeout
        )
        mock = MockCommand(name=name, directory=Path(directory))
        self._mocks.append(mock)
        return mock

    def error(self, name: str, output: str, status: int) -> MockCommand:
        """Fake *name* failing with *output* on stderr and *status*."""
        return self.add(name, stderr=output, exit_status=status)

    def remove(self, mock: MockCommand) -> None:
        """Remove *mock* before the test ends."""
        self._mocks.remove(mock)
        self.context.unregister(mock.directory)

    def close(self) -> None:
        """Remove every remaining mock, newest first."""
        errors: list[str] = []
        while self._mocks:
            mock = self._mocks.pop()
            try:
                self.context.unregister(mock.directory)
            except Exception as err:  # noqa: BLE001 - reported together below
                logger.exception("Error removing mock %r", mock.name)
                errors.append(f"{mock.name}: {type(err).__name__}: {err}")
        if errors:
            msg = "; ".join(errors)
            raise RuntimeError(msg)


@pytest.fixture
def command_mocker(
    request: pytest.FixtureRequest,
) -> t.Generator[CommandMocker, None, None]:
    """Provide a :class:`CommandMocker` bound to the process-wide context."""
    if (reason := unsupported_reason()) is not None:
        pytest.skip(reason)

    mocker = CommandMocker(
        default_context(), timeout=_register_timeout(request.config)
    )
    try:
        yield mocker
    finally:
        try:
            mocker.close()
        except Exception:
            logger.exception("Error during command_mocker fixture cleanup")
            pytest.fail("command_mocker fixture cleanup failed")


__all__ = ["CommandMocker", "command_mocker"]
