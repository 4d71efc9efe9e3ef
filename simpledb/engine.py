from __future__ import annotations

import asyncio
import copy
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

from .codec import Codec
from .json_store import atomic_write_text, dump_document, parse_document, read_text

logger = logging.getLogger(__name__)

Document = dict[str, Any]
R = TypeVar("R")

# A mutation receives a private copy of the current document and returns the
# new document (or None for "unchanged, skip the write") plus the caller's outcome.
Mutation = Callable[[Document], tuple[Document | None, R]]


class StorageEngine:
    """
    Owns the in-memory document for one database file.

    - Loading is lazy and single-flight: concurrent readers share one load.
    - Every mutation runs as a task behind one FIFO lock, so tasks see each
      other's effects in enqueue order and disk writes never interleave.
    - The cache is rebuilt from the JSON text being written, so it holds
      exactly what a reload would return.
    - A task that failed to persist restores the previous document. Readers
      may still see the new document while its write is in flight.
    - Enqueued tasks are shielded from caller cancellation and always run to
      completion or failure.
    """

    def __init__(self, path: Path, codec: Codec):
        self._path = path
        self._codec = codec
        self._cache: Document | None = None
        self._loaded = False
        self._load_task: asyncio.Task[Document] | None = None
        self._lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Cache loader
    # ------------------------------------------------------------------

    async def ensure_loaded(self) -> Document:
        """
        Return the cached document, loading it from disk on first use.

        The returned mapping is the engine's own; callers must not mutate it
        or hand it out.
        """
        if self._loaded and self._cache is not None:
            return self._cache
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._load_task)

    async def _load(self) -> Document:
        try:
            doc = await asyncio.to_thread(self._read_document)
            self._cache = doc
            self._loaded = True
            logger.debug("DB LOAD: %s (%d keys)", self._path, len(doc))
            return doc
        except Exception:
            self._cache = None
            self._loaded = False
            logger.debug("DB LOAD: failed for %s", self._path, exc_info=True)
            raise
        finally:
            self._load_task = None

    def _read_document(self) -> Document:
        raw = read_text(self._path)
        if raw is None:
            return {}
        # Freshly parsed, so nothing outside the engine holds a reference to it.
        return parse_document(self._codec.decode(raw))

    async def snapshot(self) -> Document:
        """Deep copy of the current document."""
        return copy.deepcopy(await self.ensure_loaded())

    # ------------------------------------------------------------------
    # Write pipeline
    # ------------------------------------------------------------------

    async def enqueue(self, mutation: Mutation[R]) -> R:
        """
        Append `mutation` to the write pipeline and wait for it to commit.

        Raises whatever loading, encoding or writing raised for this task.
        """
        return await self._exclusive(lambda: self._apply(mutation))

    async def export(self, dest: Path) -> Path:
        """
        Write the encoded document to `dest`, ordered after every task
        enqueued before this call.
        """

        async def _export() -> Path:
            doc = await self.ensure_loaded()
            await asyncio.to_thread(self._write_document, dest, doc)
            logger.info("DB BACKUP: %s -> %s (%d keys)", self._path, dest, len(doc))
            return dest

        return await self._exclusive(_export)

    async def _exclusive(self, fn: Callable[[], Awaitable[R]]) -> R:
        async def _task() -> R:
            async with self._lock:
                return await fn()

        task = asyncio.ensure_future(_task())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return await asyncio.shield(task)

    async def _apply(self, mutation: Mutation[R]) -> R:
        current = await self.ensure_loaded()
        new_doc, outcome = mutation(copy.deepcopy(current))
        if new_doc is None:
            return outcome

        # Values JSON cannot hold fail here, before the cache changes.
        text = dump_document(new_doc)
        previous = self._cache
        self._cache = parse_document(text)
        self._loaded = True
        try:
            await asyncio.to_thread(self._write_text, self._path, text)
        except Exception as e:
            self._cache = previous
            logger.warning("DB WRITE: failed to write %s, cache rolled back: %r", self._path, e)
            raise
        logger.debug("DB WRITE: %s (%d keys)", self._path, len(self._cache))
        return outcome

    def _write_document(self, dest: Path, doc: Document) -> None:
        self._write_text(dest, dump_document(doc))

    def _write_text(self, dest: Path, text: str) -> None:
        atomic_write_text(dest, self._codec.encode(text))
