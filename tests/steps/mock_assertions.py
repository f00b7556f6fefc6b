"""pytest-bdd assertion steps for mocked commands."""

from __future__ import annotations

import os
import shlex
import typing as t
from pathlib import Path

from pytest_bdd import parsers, then

import commandmocker
from commandmocker.errors import InvalidTargetError

if t.TYPE_CHECKING:  # pragma: no cover - typing only
    from tests.steps.mock_setup import MockWorld


def _path_segments() -> list[str]:
    return os.environ.get("PATH", "").split(os.pathsep)


@then(parsers.cfparse('the combined output is "{text}"'))
def check_output(world: MockWorld, text: str) -> None:
    assert world.output == text


@then(parsers.cfparse("the exit status is {status:d}"))
def check_status(world: MockWorld, status: int) -> None:
    assert world.returncode == status


@then(parsers.cfparse('the mock recorded the arguments "{args}"'))
def check_arguments(world: MockWorld, args: str) -> None:
    assert world.directory is not None
    assert commandmocker.captured_parameters(world.directory) == shlex.split(args)


@then("the mock recorded no arguments")
def check_no_arguments(world: MockWorld) -> None:
    assert world.directory is not None
    assert commandmocker.captured_parameters(world.directory) == []


@then("the mock has run")
def check_ran(world: MockWorld) -> None:
    assert world.directory is not None
    assert commandmocker.has_run(world.directory)


@then("the mock has not run")
def check_not_ran(world: MockWorld) -> None:
    assert world.directory is not None
    assert not commandmocker.has_run(world.directory)


@then("the mock directory leads PATH")
def check_leads_path(world: MockWorld) -> None:
    assert _path_segments()[0] == world.directory


@then("the mock directory is not on PATH")
def check_not_on_path(world: MockWorld) -> None:
    assert world.directory not in _path_segments()


@then("the mock directory no longer exists")
def check_deleted(world: MockWorld) -> None:
    assert world.directory is not None
    assert not Path(world.directory).exists()


@then("removal fails with an invalid target error")
def check_invalid_target(world: MockWorld) -> None:
    assert isinstance(world.error, InvalidTargetError)


@then(parsers.cfparse('"{path}" still exists'))
def check_still_exists(path: str) -> None:
    assert Path(path).exists()


@then("the background registration is still waiting")
def check_waiting(world: MockWorld) -> None:
    assert world.background is not None
    world.background.join(0.2)
    assert world.background.is_alive()
    assert world.background_directory is None


@then("the background registration completes")
def check_completed(world: MockWorld) -> None:
    assert world.background is not None
    world.background.join(10)
    assert not world.background.is_alive()
    assert world.background_directory is not None
    assert _path_segments()[0] == world.background_directory

