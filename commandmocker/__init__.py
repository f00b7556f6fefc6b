"""Fake command-line executables for tests that shell out.

Registering a command writes a small shell script named after it into a
private temporary directory and puts that directory first on ``PATH``. When
the code under test runs the command, the script prints the configured
output, records its arguments and environment, and exits with the configured
status. Removing the mock takes the directory off ``PATH`` and deletes it.
"""

from __future__ import annotations

from .context import (
    DIRECTORY_PREFIX,
    MockerContext,
    default_context,
    reset_default_context,
)
from .errors import (
    ArtifactWriteFailedError,
    CommandMockerError,
    DirectoryCreationFailedError,
    EnvironmentUpdateFailedError,
    InvalidTargetError,
    NotInSearchPathError,
    RegistrationTimeoutError,
)
from .inspector import (
    CapturedInvocation,
    captured_environment,
    captured_error,
    captured_output,
    captured_parameters,
    has_run,
    read_invocation,
)
from .mocker import (
    MockCommand,
    add,
    add_stderr,
    error,
    mock_command,
    register,
    remove,
)
from .platform import SHELL, is_supported, unsupported_reason

__all__ = [
    "DIRECTORY_PREFIX",
    "SHELL",
    "ArtifactWriteFailedError",
    "CapturedInvocation",
    "CommandMockerError",
    "DirectoryCreationFailedError",
    "EnvironmentUpdateFailedError",
    "InvalidTargetError",
    "MockCommand",
    "MockerContext",
    "NotInSearchPathError",
    "RegistrationTimeoutError",
    "add",
    "add_stderr",
    "captured_environment",
    "captured_error",
    "captured_output",
    "captured_parameters",
    "default_context",
    "error",
    "has_run",
    "is_supported",
    "mock_command",
    "read_invocation",
    "register",
    "remove",
    "reset_default_context",
    "unsupported_reason",
]
