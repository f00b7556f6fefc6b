"""Render and write the fake executables that stand in for real commands."""

from __future__ import annotations

import logging
import os
import shlex
import typing as t
from pathlib import Path

from .errors import ArtifactWriteFailedError

logger = logging.getLogger(__name__)

RAN_MARKER: t.Final[str] = ".ran"
OUTPUT_LOG: t.Final[str] = ".out"
ERROR_LOG: t.Final[str] = ".err"
PARAMETERS_LOG: t.Final[str] = ".params"
ENVIRONMENT_LOG: t.Final[str] = ".envs"

ARTIFACT_NAMES: t.Final[frozenset[str]] = frozenset(
    {RAN_MARKER, OUTPUT_LOG, ERROR_LOG, PARAMETERS_LOG, ENVIRONMENT_LOG}
)

EXECUTABLE_MODE: t.Final[int] = 0o755

# Placeholders are filled with shell-quoted literals, so the configured text
# reaches printf byte for byte: no expansion, trailing newlines kept. The
# script assigns no shell variables: assigning to a name the caller exported
# would change the environment that `env` dumps.
SCRIPT_TEMPLATE: t.Final[str] = """\
#!/bin/sh
printf '%s' {stdout} > {output_log}
printf '%s' {stdout}
printf '%s' {stderr} > {error_log}
printf '%s' {stderr} >&2

while [ "$#" -gt 0 ]
do
    printf '%s\\n' "$1" >> {parameters_log}
    shift
done
touch {ran_marker}
env >> {environment_log}
exit {status}
"""


def _quote(label: str, value: str) -> str:
    """Return *value* as a single shell word."""
    if "\x00" in value:
        msg = f"{label} cannot contain NUL bytes"
        raise ArtifactWriteFailedError(msg)
    return shlex.quote(value)


def render_script(
    directory: os.PathLike[str] | str,
    *,
    stdout: str = "",
    stderr: str = "",
    exit_status: int = 0,
) -> str:
    """Return the script text for a mock living in *directory*."""
    root = os.fspath(directory)
    _quote("directory", root)

    def log(artifact: str) -> str:
        return shlex.quote(os.path.join(root, artifact))

    return SCRIPT_TEMPLATE.format(
        output_log=log(OUTPUT_LOG),
        error_log=log(ERROR_LOG),
        parameters_log=log(PARAMETERS_LOG),
        ran_marker=log(RAN_MARKER),
        environment_log=log(ENVIRONMENT_LOG),
        stdout=_quote("stdout", stdout),
        stderr=_quote("stderr", stderr),
        status=int(exit_status),
    )


def write_executable(directory: Path, name: str, content: str) -> Path:
    """Write *content* to ``directory/name`` and mark it executable."""
    target = directory / name
    try:
        target.write_text(content, encoding="utf-8", errors="surrogateescape")
        target.chmod(EXECUTABLE_MODE)
    except (OSError, UnicodeError) as exc:
        msg = f"Could not write mock executable {target}: {exc}"
        raise ArtifactWriteFailedError(msg) from exc
    logger.debug("Wrote mock executable %s", target)
    return target


__all__ = [
    "ARTIFACT_NAMES",
    "ENVIRONMENT_LOG",
    "ERROR_LOG",
    "OUTPUT_LOG",
    "PARAMETERS_LOG",
    "RAN_MARKER",
    "SCRIPT_TEMPLATE",
    "render_script",
    "write_executable",
]
