"""Shared helpers for normalizing and comparing filesystem paths."""

from __future__ import annotations

import os


def normalize_path_string(path: str) -> str:
    """Return a normalized string path without touching the filesystem."""
    return os.path.normpath(path)


def normalize_path(path: os.PathLike[str] | str) -> str:
    """Normalize *path* regardless of whether it is a string or Path."""
    return normalize_path_string(os.fspath(path))


def resolved_path(path: os.PathLike[str] | str) -> str:
    """Return the absolute, symlink-free form of *path*."""
    return os.path.realpath(os.fspath(path))


def is_strictly_within(
    path: os.PathLike[str] | str, root: os.PathLike[str] | str
) -> bool:
    """Return ``True`` when *path* lies beneath *root* and is not *root* itself.

    Both sides are resolved first, so ``/tmp/../etc`` is not mistaken for a
    child of ``/tmp`` and ``/tmpfoo`` is not mistaken for one either.
    """
    candidate = resolved_path(path)
    base = resolved_path(root)
    if candidate == base:
        return False
    try:
        return os.path.commonpath([candidate, base]) == base
    except ValueError:
        return False
