from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, Protocol, TypeVar

from .errors import RequestError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of an operation whose failure is an expected case (e.g. missing key).

    `ok=True` carries `value`; `ok=False` carries `error`.
    """

    ok: bool
    value: T | None = None
    error: RequestError | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: RequestError) -> "Result[T]":
        return cls(ok=False, error=error)

    def unwrap(self) -> T | None:
        """Return `value`, or raise `error` for a failed result."""
        if not self.ok and self.error is not None:
            raise self.error
        return self.value


class KeyValueStore(Protocol):
    """
    Async key-value interface over a single JSON document.
    """

    async def get(self, key: str) -> Result[Any]: ...
    async def set(self, key: str, value: Any) -> None: ...
    async def delete(self, key: str) -> Result[None]: ...
    async def list(self) -> Result[list[str]]: ...
    async def size(self) -> int: ...
    async def empty(self) -> "KeyValueStore": ...
    async def get_all(self) -> dict[str, Any]: ...
    async def has(self, key: str) -> bool: ...
    async def backup(self, filename: str) -> Path: ...
