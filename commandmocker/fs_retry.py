"""Recursive directory removal with a retry policy."""

from __future__ import annotations

import dataclasses as dc
import logging
import shutil
import time
from pathlib import Path

_logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class RetryConfig:
    """
    Configuration for retry loops.

    Attributes
    ----------
    max_attempts : int
        Maximum number of attempts (must be >= 1).
    retry_delay : float
        Delay in seconds between retry attempts (must be >= 0).

    Raises
    ------
    ValueError
        If max_attempts < 1 or retry_delay < 0.
    """

    max_attempts: int
    retry_delay: float

    def __post_init__(self) -> None:
        """Validate retry configuration values."""
        if self.max_attempts < 1:
            msg = "max_attempts must be >= 1"
            raise ValueError(msg)
        if self.retry_delay < 0:
            msg = "retry_delay must be >= 0"
            raise ValueError(msg)


DEFAULT_RMTREE_RETRY = RetryConfig(max_attempts=4, retry_delay=0.1)


class RobustRmtreeError(OSError):
    """
    Raised when :func:`robust_rmtree` exhausts all removal attempts.

    Attributes
    ----------
    path : Path
        The directory path that could not be removed.
    attempts : int
        The number of attempts made.
    last_exception : Exception | None
        The last exception encountered during removal.
    """

    def __init__(
        self, path: Path, attempts: int, last_exception: Exception | None
    ) -> None:
        msg = f"Failed to remove {path} after {attempts} attempts"
        super().__init__(msg)
        self.path = path
        self.attempts = attempts
        self.last_exception = last_exception


def robust_rmtree(
    path: Path,
    *,
    config: RetryConfig = DEFAULT_RMTREE_RETRY,
    logger: logging.Logger | None = None,
) -> None:
    """
    Remove a directory tree, retrying transient failures.

    A mock executable may still be running (and writing its logs) when the
    owning test tears it down, so a single ``rmtree`` can race with new files
    appearing. A missing *path* is treated as already removed.

    Raises
    ------
    RobustRmtreeError
        When all retry attempts are exhausted, wrapping the last OSError.
    """
    if not path.exists():
        return

    log = logger or _logger
    for attempt in range(config.max_attempts):
        try:
            shutil.rmtree(path)
        except OSError as exc:
            if isinstance(exc, FileNotFoundError) and not path.exists():
                return
            if attempt == config.max_attempts - 1:
                log.warning(
                    "Failed to remove mock directory %s after %d attempts",
                    path,
                    config.max_attempts,
                )
                raise RobustRmtreeError(path, config.max_attempts, exc) from exc
            log.debug(
                "Attempt %d to remove %s failed. Retrying in %.1fs...",
                attempt + 1,
                path,
                config.retry_delay,
            )
            time.sleep(config.retry_delay)
        else:
            log.debug("Removed mock directory: %s", path)
            return
