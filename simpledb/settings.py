from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from .errors import InvalidKeyLengthError
from .paths import DEFAULT_DB_FILENAME

HEX_KEY_RE = re.compile(r"^[0-9a-fA-F]{64}$")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class DatabaseOptions(BaseModel):
    """
    Construction-time options for a Database.

    encryption_key: 64 hex characters (32 bytes) enabling AES-256-GCM at rest.
    base_dir: directory the database file must stay inside (defaults to cwd).
    """

    model_config = ConfigDict(frozen=True)

    encryption_key: str | None = None
    base_dir: Path | None = None

    @field_validator("encryption_key", mode="before")
    @classmethod
    def _check_key(cls, v: object) -> object:
        if v is None:
            return None
        if isinstance(v, bytes):
            if len(v) != 32:
                raise InvalidKeyLengthError(f"Encryption key must be 32 bytes, got {len(v)}.")
            return v.hex()
        if not isinstance(v, str) or not HEX_KEY_RE.match(v.strip()):
            # Raised directly so the caller sees the store's error type, not a ValidationError.
            raise InvalidKeyLengthError()
        return v.strip().lower()

    def __repr__(self) -> str:
        key = "<redacted>" if self.encryption_key else None
        return f"DatabaseOptions(encryption_key={key}, base_dir={self.base_dir!r})"


def _env_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


@dataclass(frozen=True)
class Settings:
    db_file: str
    encryption_key: str | None
    base_dir: Path | None
    log_level: str

    def to_options(self) -> DatabaseOptions:
        return DatabaseOptions(encryption_key=self.encryption_key, base_dir=self.base_dir)


def get_settings(env_file: str | None = None) -> Settings:
    if env_file:
        load_dotenv(env_file)

    base_dir = _env_str("SIMPLEDB_BASE_DIR")
    log_level = (_env_str("SIMPLEDB_LOG_LEVEL") or "WARNING").upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"SIMPLEDB_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}.")

    return Settings(
        db_file=_env_str("SIMPLEDB_FILE") or DEFAULT_DB_FILENAME,
        encryption_key=_env_str("SIMPLEDB_ENCRYPTION_KEY"),
        base_dir=Path(base_dir) if base_dir else None,
        log_level=log_level,
    )


def configure_logging(level: str | int = "WARNING") -> None:
    """Basic console logging for scripts; the library never installs handlers itself."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
