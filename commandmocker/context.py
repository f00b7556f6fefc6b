"""Registration and teardown of mock executables.

A :class:`MockerContext` edits the two pieces of shared state a mock touches:
the registry of live command names and the ``PATH`` variable. It remembers
``PATH`` as it found it; :meth:`close` removes every mock it registered that
is still live and puts ``PATH`` back.

Most callers use the process-wide instance returned by
:func:`default_context`, which backs the module-level helpers in
:mod:`commandmocker.mocker`.
"""

from __future__ import annotations

import logging
import os
import secrets
import tempfile
import threading
import typing as t
from pathlib import Path

from ._path_utils import is_strictly_within, normalize_path
from ._validators import validate_command_name, validate_exit_status
from .errors import DirectoryCreationFailedError, InvalidTargetError
from .fs_retry import DEFAULT_RMTREE_RETRY, RetryConfig, robust_rmtree
from .registry import MockRegistry
from .scriptgen import render_script, write_executable
from .search_path import PATH_VAR, SearchPath

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import types

logger = logging.getLogger(__name__)

DIRECTORY_PREFIX: t.Final[str] = "commandmocker-"
DIRECTORY_MODE: t.Final[int] = 0o700
_TOKEN_BYTES: t.Final[int] = 8

# Contexts editing the real process environment share one PATH lock and one
# registry, so a name is live at most once per process.
_PROCESS_PATH_LOCK = threading.Lock()
_PROCESS_REGISTRY = MockRegistry()

CleanupError = tuple[str, BaseException]


class MockerContext:
    """Create fake executables and publish them on ``PATH``."""

    def __init__(
        self,
        *,
        temp_root: os.PathLike[str] | str | None = None,
        prefix: str = DIRECTORY_PREFIX,
        environ: t.MutableMapping[str, str] | None = None,
        rmtree_retry: RetryConfig = DEFAULT_RMTREE_RETRY,
    ) -> None:
        """Create a context that owns no mocks yet.

        Parameters
        ----------
        temp_root:
            Directory under which instance directories are created, and the
            only place :meth:`unregister` will delete from. Defaults to
            :func:`tempfile.gettempdir`.
        prefix:
            Name prefix of instance directories.
        environ:
            Mapping holding ``PATH``; defaults to :data:`os.environ`. Every
            context on :data:`os.environ` shares the process registry; any
            other mapping gets a registry of its own.
        rmtree_retry:
            Retry policy used when deleting instance directories.
        """
        self._environ = os.environ if environ is None else environ
        self.temp_root = Path(
            tempfile.gettempdir() if temp_root is None else temp_root
        )
        self.prefix = prefix
        process_wide = self._environ is os.environ
        self.registry = _PROCESS_REGISTRY if process_wide else MockRegistry()
        self.search_path = SearchPath(
            self._environ, lock=_PROCESS_PATH_LOCK if process_wide else None
        )
        self._owned: set[str] = set()
        self._owned_lock = threading.Lock()
        self.original_path = self._environ.get(PATH_VAR)
        self._rmtree_retry = rmtree_retry

    def __enter__(self) -> MockerContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        self.close(raise_errors=exc_type is None)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(
        self,
        name: str,
        stdout: str = "",
        stderr: str = "",
        exit_status: int = 0,
        *,
        timeout: float | None = None,
    ) -> str:
        """Create a fake *name* executable and return its directory.

        Blocks while another mock named *name* is live. With *timeout* set,
        gives up after that many seconds with
        :class:`~commandmocker.errors.RegistrationTimeoutError`.
        """
        validate_command_name(name)
        validate_exit_status(exit_status)
        directory = self.registry.reserve(
            name, self._allocate_directory, timeout=timeout
        )
        with self._owned_lock:
            self._owned.add(normalize_path(directory))
        try:
            self._materialize(Path(directory), name, stdout, stderr, exit_status)
        except BaseException:
            self._rollback(directory)
            raise
        logger.debug("Registered mock %r in %s", name, directory)
        return directory

    def _allocate_directory(self, reserved: t.Collection[str]) -> str:
        """Pick an instance directory that neither exists nor is reserved."""
        while True:
            token = secrets.token_hex(_TOKEN_BYTES)
            candidate = os.fspath(self.temp_root / f"{self.prefix}{token}")
            if candidate not in reserved and not os.path.lexists(candidate):
                return candidate

    def _materialize(
        self,
        directory: Path,
        name: str,
        stdout: str,
        stderr: str,
        exit_status: int,
    ) -> None:
        try:
            directory.mkdir(mode=DIRECTORY_MODE, parents=True)
        except OSError as exc:
            msg = f"Could not create mock directory {directory}: {exc}"
            raise DirectoryCreationFailedError(msg) from exc
        script = render_script(
            directory, stdout=stdout, stderr=stderr, exit_status=exit_status
        )
        write_executable(directory, name, script)
        self.search_path.prepend(directory)

    def _rollback(self, directory: str) -> None:
        """Undo a half-finished registration so the name does not stay busy."""
        try:
            robust_rmtree(Path(directory), config=self._rmtree_retry)
        except OSError:
            logger.exception("Could not remove %s after failed registration", directory)
        finally:
            self._release(directory)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def unregister(self, directory: os.PathLike[str] | str) -> None:
        """Remove *directory* from ``PATH`` and delete it.

        Raises :class:`~commandmocker.errors.InvalidTargetError` for paths
        outside :attr:`temp_root` (nothing is deleted) and
        :class:`~commandmocker.errors.NotInSearchPathError` when *directory*
        is not on ``PATH``. The registry entry is dropped in every case.
        """
        entry = os.fspath(directory)
        try:
            if not is_strictly_within(entry, self.temp_root):
                msg = (
                    "Only temporary directories can be removed, "
                    f"tried to remove {entry!r}"
                )
                raise InvalidTargetError(msg)
            self.search_path.remove(entry)
            robust_rmtree(Path(entry), config=self._rmtree_retry)
        finally:
            self._release(entry)
        logger.debug("Unregistered mock in %s", entry)

    def _release(self, directory: str) -> None:
        with self._owned_lock:
            self._owned.discard(normalize_path(directory))
        self.registry.release(directory)

    def live_mocks(self) -> dict[str, str]:
        """Return the ``name -> directory`` mapping of this context's live mocks."""
        with self._owned_lock:
            owned = set(self._owned)
        return {
            name: directory
            for name, directory in self.registry.snapshot().items()
            if normalize_path(directory) in owned
        }

    def close(self, *, raise_errors: bool = True) -> None:
        """Unregister this context's live mocks and restore ``PATH``.

        ``PATH`` is only restored once no context sharing the registry has
        live mocks left.
        """
        cleanup_errors: list[CleanupError] = []
        for name, directory in self.live_mocks().items():
            try:
                self.unregister(directory)
            except Exception as exc:  # noqa: BLE001 - aggregated below
                cleanup_errors.append((f"{name} ({directory}): {exc}", exc))
        if len(self.registry) == 0:
            try:
                self.search_path.restore(self.original_path)
            except Exception as exc:  # noqa: BLE001 - aggregated below
                cleanup_errors.append((f"PATH restoration failed: {exc}", exc))
        if cleanup_errors:
            error_msg = "; ".join(msg for msg, _ in cleanup_errors)
            logger.error("MockerContext cleanup encountered errors: %s", error_msg)
            if raise_errors:
                msg = f"Cleanup failed: {error_msg}"
                raise RuntimeError(msg) from cleanup_errors[0][1]


_default: MockerContext | None = None
_default_lock = threading.Lock()


def default_context() -> MockerContext:
    """Return the process-wide context, creating it on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = MockerContext()
        return _default


def reset_default_context() -> None:
    """Close and forget the process-wide context.

    The next :func:`default_context` call starts from an empty registry and
    captures ``PATH`` afresh.
    """
    global _default
    with _default_lock:
        context, _default = _default, None
    if context is not None:
        context.close()


__all__ = [
    "DIRECTORY_PREFIX",
    "MockerContext",
    "default_context",
    "reset_default_context",
]
