"""Unit tests for :mod:`commandmocker.search_path`."""

from __future__ import annotations

import os
import threading

import pytest

from commandmocker.errors import EnvironmentUpdateFailedError, NotInSearchPathError
from commandmocker.search_path import SearchPath, prepend_segment, remove_segment

SEP = os.pathsep


def _join(*parts: str) -> str:
    return SEP.join(parts)


def test_prepend_segment_places_directory_first() -> None:
    """The new directory leads, followed by one delimiter."""
    assert prepend_segment(_join("/usr/bin", "/bin"), "/tmp/m") == _join(
        "/tmp/m", "/usr/bin", "/bin"
    )


@pytest.mark.parametrize("value", [None, ""])
def test_prepend_segment_without_existing_path(value: str | None) -> None:
    """No trailing delimiter is added when PATH is empty or unset."""
    assert prepend_segment(value, "/tmp/m") == "/tmp/m"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (_join("/tmp/m", "/usr/bin", "/bin"), _join("/usr/bin", "/bin")),
        (_join("/tmp/a", "/tmp/m", "/bin"), _join("/tmp/a", "/bin")),
        (_join("/usr/bin", "/tmp/m"), "/usr/bin"),
        ("/tmp/m", ""),
    ],
    ids=["first", "middle", "last", "only"],
)
def test_remove_segment_drops_one_delimiter(value: str, expected: str) -> None:
    """Removal works wherever the segment sits, including the last slot."""
    assert remove_segment(value, "/tmp/m") == expected


def test_remove_segment_matches_whole_segments_only() -> None:
    """A directory that only prefixes another segment is not a match."""
    with pytest.raises(NotInSearchPathError):
        remove_segment(_join("/tmp/mock-2", "/bin"), "/tmp/mock")


def test_remove_segment_keeps_empty_segments() -> None:
    """Empty segments (the working directory) survive the edit."""
    value = _join("", "/tmp/m", "/bin")
    assert remove_segment(value, "/tmp/m") == _join("", "/bin")


def test_remove_segment_only_first_occurrence() -> None:
    """Duplicate entries are removed one at a time."""
    value = _join("/tmp/m", "/bin", "/tmp/m")
    assert remove_segment(value, "/tmp/m") == _join("/bin", "/tmp/m")


def test_search_path_round_trip_on_mapping() -> None:
    """prepend then remove restores the original value."""
    environ = {"PATH": _join("/usr/bin", "/bin")}
    search_path = SearchPath(environ)
    search_path.prepend("/tmp/m")
    assert search_path.segments()[0] == "/tmp/m"
    assert search_path.contains("/tmp/m")
    search_path.remove("/tmp/m")
    assert environ["PATH"] == _join("/usr/bin", "/bin")
    assert not search_path.contains("/tmp/m")


def test_search_path_remove_missing_raises() -> None:
    """Removing an absent directory leaves PATH untouched."""
    environ = {"PATH": "/bin"}
    with pytest.raises(NotInSearchPathError, match="not in"):
        SearchPath(environ).remove("/tmp/m")
    assert environ["PATH"] == "/bin"


def test_search_path_restore_unsets_when_original_missing() -> None:
    """Restoring ``None`` removes the variable entirely."""
    environ: dict[str, str] = {}
    search_path = SearchPath(environ)
    search_path.prepend("/tmp/m")
    search_path.restore(None)
    assert "PATH" not in environ


def test_search_path_wraps_environment_failures() -> None:
    """Mappings refusing the update surface EnvironmentUpdateFailedError."""

    class _RefusingEnviron(dict[str, str]):
        def __setitem__(self, key: str, value: str) -> None:
            raise OSError("read-only environment")

    with pytest.raises(EnvironmentUpdateFailedError, match="read-only"):
        SearchPath(_RefusingEnviron(PATH="/bin")).prepend("/tmp/m")


def test_concurrent_edits_are_not_lost() -> None:
    """Interleaved prepends and removals keep every other segment intact."""
    environ = {"PATH": "/bin"}
    search_path = SearchPath(environ)
    directories = [f"/tmp/mock-{index}" for index in range(20)]

    def cycle(directory: str) -> None:
        for _ in range(25):
            search_path.prepend(directory)
            search_path.remove(directory)

    threads = [threading.Thread(target=cycle, args=(d,)) for d in directories]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert environ["PATH"] == "/bin"
