"""Process-wide bookkeeping of live mocks, keyed by command name."""

from __future__ import annotations

import logging
import threading
import typing as t

from ._path_utils import normalize_path
from ._validators import validate_positive_finite_timeout
from .errors import RegistrationTimeoutError

logger = logging.getLogger(__name__)


class MockRegistry:
    """Map command names to the directory of their live mock.

    At most one mock per name is live at a time. :meth:`reserve` blocks until
    the name is free, and :meth:`release` wakes every waiter so the next one
    can claim it.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._live: dict[str, str] = {}

    def reserve(
        self,
        name: str,
        allocate: t.Callable[[t.Collection[str]], str],
        *,
        timeout: float | None = None,
    ) -> str:
        """Claim *name* and record the directory returned by *allocate*.

        *allocate* runs under the registry lock and receives the directories
        already reserved, so two registrants can never pick the same one.
        Waits indefinitely unless *timeout* (seconds) is given.
        """
        if timeout is not None:
            validate_positive_finite_timeout(timeout)
        with self._cond:
            if name in self._live:
                logger.debug("Waiting for live mock %r to be removed", name)
            if not self._cond.wait_for(lambda: name not in self._live, timeout):
                msg = f"Command {name!r} is still mocked after {timeout}s"
                raise RegistrationTimeoutError(msg)
            directory = allocate(frozenset(self._live.values()))
            self._live[name] = directory
        logger.debug("Reserved %r -> %s", name, directory)
        return directory

    def release(self, directory: str) -> str | None:
        """Forget the mock living in *directory* and return its name."""
        target = normalize_path(directory)
        with self._cond:
            name = next(
                (
                    key
                    for key, value in self._live.items()
                    if normalize_path(value) == target
                ),
                None,
            )
            if name is None:
                return None
            del self._live[name]
            self._cond.notify_all()
        logger.debug("Released %r (%s)", name, directory)
        return name

    def lookup(self, name: str) -> str | None:
        """Return the directory of the live mock for *name*, if any."""
        with self._cond:
            return self._live.get(name)

    def snapshot(self) -> dict[str, str]:
        """Return a copy of the live ``name -> directory`` mapping."""
        with self._cond:
            return dict(self._live)

    def __contains__(self, name: object) -> bool:
        with self._cond:
            return name in self._live

    def __len__(self) -> int:
        with self._cond:
            return len(self._live)


__all__ = ["MockRegistry"]
