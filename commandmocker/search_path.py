"""Locked edits of the ``PATH`` environment variable."""

from __future__ import annotations

import logging
import os
import threading
import typing as t

from ._path_utils import normalize_path
from .errors import EnvironmentUpdateFailedError, NotInSearchPathError

logger = logging.getLogger(__name__)

PATH_VAR: t.Final[str] = "PATH"


def _segment_index(segments: list[str], directory: str) -> int | None:
    """Return the index of the first segment naming *directory*."""
    target = normalize_path(directory)
    for index, segment in enumerate(segments):
        # An empty segment means the current directory; never match it.
        if segment and normalize_path(segment) == target:
            return index
    return None


def prepend_segment(value: str | None, directory: os.PathLike[str] | str) -> str:
    """Return *value* with *directory* placed in front.

    An unset or empty ``PATH`` yields just *directory*: a trailing delimiter
    would add an empty segment, which shells treat as the working directory.
    """
    entry = os.fspath(directory)
    if not value:
        return entry
    return f"{entry}{os.pathsep}{value}"


def remove_segment(value: str | None, directory: os.PathLike[str] | str) -> str:
    """Return *value* without the first segment naming *directory*.

    Exactly one delimiter goes with it: the following one, or the preceding
    one when *directory* is the last segment.
    """
    entry = os.fspath(directory)
    segments = (value or "").split(os.pathsep)
    index = _segment_index(segments, entry)
    if index is None:
        msg = f"{entry!r} is not in ${PATH_VAR}"
        raise NotInSearchPathError(msg)
    del segments[index]
    return os.pathsep.join(segments)


class SearchPath:
    """Serialize read-modify-write sequences on ``PATH``.

    ``os.environ`` updates are not atomic with the read that precedes them,
    so every edit goes through one lock shared by all mocks of a context.
    """

    def __init__(
        self,
        environ: t.MutableMapping[str, str] | None = None,
        *,
        var: str = PATH_VAR,
        lock: threading.Lock | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._var = var
        self._lock = threading.Lock() if lock is None else lock

    @property
    def value(self) -> str | None:
        """Return the current raw value, or ``None`` when unset."""
        return self._environ.get(self._var)

    def segments(self) -> list[str]:
        """Return the current value split on ``os.pathsep``."""
        value = self.value
        return value.split(os.pathsep) if value else []

    def contains(self, directory: os.PathLike[str] | str) -> bool:
        """Return ``True`` when *directory* is a segment of the current value."""
        return _segment_index(self.segments(), os.fspath(directory)) is not None

    def prepend(self, directory: os.PathLike[str] | str) -> str:
        """Place *directory* at the front and return the committed value."""
        with self._lock:
            updated = prepend_segment(self.value, directory)
            self._commit(updated)
        logger.debug("Prepended %s to $%s", directory, self._var)
        return updated

    def remove(self, directory: os.PathLike[str] | str) -> str:
        """Drop *directory* from wherever it sits and return the new value."""
        with self._lock:
            updated = remove_segment(self.value, directory)
            self._commit(updated)
        logger.debug("Removed %s from $%s", directory, self._var)
        return updated

    def restore(self, original: str | None) -> None:
        """Reset the variable to *original*, unsetting it when ``None``."""
        with self._lock:
            if original is None:
                self._environ.pop(self._var, None)
            else:
                self._commit(original)

    def _commit(self, value: str) -> None:
        try:
            self._environ[self._var] = value
        except (OSError, ValueError) as exc:
            msg = f"Could not update ${self._var}: {exc}"
            raise EnvironmentUpdateFailedError(msg) from exc


__all__ = ["PATH_VAR", "SearchPath", "prepend_segment", "remove_segment"]
