from __future__ import annotations

import os
from pathlib import Path

from .errors import InvalidFilenameError, PathTraversalError

DEFAULT_DB_FILENAME = "database.json"


def default_base_dir() -> Path:
    return Path.cwd().resolve()


def resolve_db_path(filename: str | os.PathLike[str], base_dir: Path | None = None) -> Path:
    """
    Resolve `filename` against `base_dir` and make sure it stays inside it.

    Raises InvalidFilenameError for NUL bytes in the filename and
    PathTraversalError when the resolved path escapes `base_dir`.
    """
    raw = os.fspath(filename)
    # Checked on the whole string: a NUL in a directory part breaks resolve() too.
    if "\0" in raw:
        raise InvalidFilenameError()

    base = (base_dir or default_base_dir()).resolve()
    candidate = (base / raw).resolve()
    if candidate != base and base not in candidate.parents:
        raise PathTraversalError(f"Path traversal attempt detected: {raw!r} is outside {base}.")
    if candidate == base:
        raise InvalidFilenameError(f"Invalid filename: {raw!r} does not name a file.")
    return candidate
