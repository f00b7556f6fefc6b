"""Exception hierarchy raised by commandmocker."""

from __future__ import annotations


class CommandMockerError(Exception):
    """Base class for all commandmocker errors."""


class DirectoryCreationFailedError(CommandMockerError, OSError):
    """Raised when a mock's instance directory cannot be created."""


class ArtifactWriteFailedError(CommandMockerError, OSError):
    """Raised when the fake executable cannot be rendered or written."""


class InvalidTargetError(CommandMockerError, ValueError):
    """Raised when asked to remove a directory outside the temp root."""


class NotInSearchPathError(CommandMockerError, LookupError):
    """Raised when a directory is not a segment of ``PATH``."""


class EnvironmentUpdateFailedError(CommandMockerError, OSError):
    """Raised when ``PATH`` could not be rewritten."""


class RegistrationTimeoutError(CommandMockerError, TimeoutError):
    """Raised when a command name stays busy past the registration timeout."""


__all__ = [
    "ArtifactWriteFailedError",
    "CommandMockerError",
    "DirectoryCreationFailedError",
    "EnvironmentUpdateFailedError",
    "InvalidTargetError",
    "NotInSearchPathError",
    "RegistrationTimeoutError",
]
