from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

from .codec import make_codec
from .engine import Document, StorageEngine
from .errors import KeyNotFoundError, RequestError
from .interfaces import KeyValueStore, Result
from .paths import DEFAULT_DB_FILENAME, default_base_dir, resolve_db_path
from .settings import DatabaseOptions, Settings

logger = logging.getLogger(__name__)


def _check_key(key: str) -> None:
    if not isinstance(key, str):
        raise TypeError(f"Keys must be str, got {type(key).__name__}.")


class Database(KeyValueStore):
    """
    Async key-value store persisted as one JSON document on disk.

    Reads are served from an in-memory cache loaded once; writes go through
    the engine's FIFO pipeline and are on disk before the call returns.
    Values handed in or out are deep copies, never references into the cache.

    With `encryption_key` (64 hex chars) the file is an AES-256-GCM envelope
    instead of plain JSON.
    """

    def __init__(
        self,
        filename: str | os.PathLike[str] = DEFAULT_DB_FILENAME,
        options: DatabaseOptions | None = None,
        *,
        encryption_key: str | bytes | None = None,
        base_dir: Path | None = None,
    ):
        if options is None:
            options = DatabaseOptions(encryption_key=encryption_key, base_dir=base_dir)
        elif encryption_key is not None or base_dir is not None:
            raise ValueError("Pass either options or encryption_key/base_dir, not both.")
        self._base_dir = (options.base_dir or default_base_dir()).resolve()
        self._engine = StorageEngine(
            resolve_db_path(filename, self._base_dir),
            make_codec(options.encryption_key),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a Database from env settings and apply their log level to the package logger."""
        logging.getLogger("simpledb").setLevel(settings.log_level)
        return cls(settings.db_file, settings.to_options())

    def __repr__(self) -> str:
        return f"Database(path={str(self.path)!r})"

    @property
    def path(self) -> Path:
        return self._engine.path

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Result[Any]:
        _check_key(key)
        doc = await self._engine.ensure_loaded()
        if key not in doc:
            return Result.failure(KeyNotFoundError())
        return Result.success(copy.deepcopy(doc[key]))

    async def has(self, key: str) -> bool:
        _check_key(key)
        return key in await self._engine.ensure_loaded()

    async def list(self) -> Result[list[str]]:
        try:
            doc = await self._engine.ensure_loaded()
        except RequestError as e:
            return Result.failure(e)
        return Result.success(list(doc))

    async def size(self) -> int:
        return len(await self._engine.ensure_loaded())

    async def get_all(self) -> dict[str, Any]:
        return await self._engine.snapshot()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def set(self, key: str, value: Any) -> None:
        _check_key(key)
        stored = copy.deepcopy(value)

        def _assign(doc: Document) -> tuple[Document, None]:
            doc[key] = stored
            return doc, None

        await self._engine.enqueue(_assign)

    async def delete(self, key: str) -> Result[None]:
        _check_key(key)

        def _remove(doc: Document) -> tuple[Document | None, Result[None]]:
            if key not in doc:
                return None, Result.failure(KeyNotFoundError())
            del doc[key]
            return doc, Result.success()

        return await self._engine.enqueue(_remove)

    async def empty(self) -> "Database":
        await self._engine.enqueue(lambda _doc: ({}, None))
        logger.info("DB EMPTY: %s", self.path)
        return self

    async def backup(self, filename: str | os.PathLike[str]) -> Path:
        """
        Copy the current document to `filename` (inside the same base dir),
        encoded exactly like the main file.
        """
        dest = resolve_db_path(filename, self._base_dir)
        if dest == self.path:
            raise ValueError("Backup target must differ from the database file.")
        return await self._engine.export(dest)
