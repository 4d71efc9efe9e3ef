from __future__ import annotations

import contextlib
import json
from pathlib import Path
from typing import Any

from .errors import CorruptedJsonError, IoFailureError


def read_text(path: Path) -> str | None:
    """
    Read the raw database file.

    Returns None for missing files and for files holding only whitespace.
    OS errors other than "not found" are raised as IoFailureError.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise IoFailureError(f"Failed to read database file {path}: {e.__class__.__name__}.") from e
    if not raw.strip():
        return None
    return raw


def atomic_write_text(path: Path, payload: str) -> None:
    """
    Atomically replace `path` with `payload` by writing a temp file then replacing.
    """
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8") as f:
            f.write(payload)
        tmp_path.replace(path)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)
        raise IoFailureError(f"Failed to write database file {path}: {e.__class__.__name__}.") from e


def dump_document(doc: dict[str, Any], *, indent: int = 2) -> str:
    return json.dumps(doc, indent=indent, ensure_ascii=False)


def parse_document(text: str) -> dict[str, Any]:
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptedJsonError(f"Failed to parse database content as JSON: {e.msg} at line {e.lineno}.") from e
    if not isinstance(doc, dict):
        raise CorruptedJsonError(
            f"Failed to parse database content: expected a JSON object, got {type(doc).__name__}."
        )
    return doc
