"""Resolve command names to validated executable paths."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from command_exec.errors import CommandIsNotAFile, CommandIsNotExecutable, CommandNotFound


def default_search_paths() -> tuple[Path, ...]:
    """Return the directories listed in ``$PATH``."""

    raw = os.environ.get("PATH", "")
    return tuple(Path(entry) for entry in raw.split(os.pathsep) if entry)


def resolve_executable(
    name: str | Path,
    search_paths: Iterable[Path | str] | None = None,
    *,
    secure: bool = False,
) -> Path:
    """Resolve a command name to an absolute, executable file path.

    Names containing a path separator are taken relative to the current
    directory; bare names are looked up in ``search_paths`` in order.

    Args:
        name: Command name or path.
        search_paths: Directories to search for bare names. Defaults to ``$PATH``.
        secure: Drop ``..`` segments from the name before resolving.

    Returns:
        Absolute path to the executable.

    Raises:
        CommandNotFound: If no matching file exists.
        CommandIsNotAFile: If the path exists but is not a regular file.
        CommandIsNotExecutable: If the file lacks execute permission.
    """

    text = str(name)
    if not text:
        raise CommandNotFound("Command name is empty.", text)
    if secure:
        text = _strip_parent_segments(text)

    if os.sep in text or (os.altsep and os.altsep in text):
        candidate = Path(os.path.abspath(os.path.expanduser(text)))
    else:
        paths = default_search_paths() if search_paths is None else search_paths
        candidate = _search(text, [Path(entry) for entry in paths])

    validate_executable(candidate)
    return candidate


def validate_executable(path: Path) -> None:
    """Raise if ``path`` is not an existing, executable regular file."""

    if not path.exists():
        raise CommandNotFound(f"Command '{path}' not found.", path)
    if not path.is_file():
        raise CommandIsNotAFile(f"Command '{path}' is not a file.", path)
    if not os.access(path, os.X_OK):
        raise CommandIsNotExecutable(f"Command '{path}' is not executable.", path)


def _search(name: str, search_paths: list[Path]) -> Path:
    candidates = [Path(os.path.abspath(directory / name)) for directory in search_paths]
    for candidate in candidates:
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate
    # Report the first existing match so validation names the real problem.
    for candidate in candidates:
        if candidate.exists():
            return candidate
    raise CommandNotFound(
        f"Command '{name}' not found in search paths: "
        + os.pathsep.join(str(directory) for directory in search_paths),
        name,
    )


def _strip_parent_segments(text: str) -> str:
    absolute = text.startswith(os.sep)
    parts = [part for part in text.split(os.sep) if part and part != ".."]
    stripped = os.sep.join(parts)
    if absolute:
        return os.sep + stripped
    return stripped
