from __future__ import annotations

import asyncio
import os
from pathlib import Path

import pytest

from simpledb import Database, DatabaseOptions, get_settings
from simpledb.errors import InvalidKeyLengthError


def test_defaults_without_environment(sandbox_dir: Path):
    s = get_settings()
    assert s.db_file == "database.json"
    assert s.encryption_key is None
    assert s.base_dir is None
    assert s.log_level == "WARNING"


def test_reads_environment(sandbox_dir: Path, monkeypatch: pytest.MonkeyPatch, hex_key: str):
    monkeypatch.setenv("SIMPLEDB_FILE", "from_env.json")
    monkeypatch.setenv("SIMPLEDB_ENCRYPTION_KEY", hex_key.upper())
    monkeypatch.setenv("SIMPLEDB_BASE_DIR", str(sandbox_dir))
    monkeypatch.setenv("SIMPLEDB_LOG_LEVEL", "debug")

    s = get_settings()
    assert s.db_file == "from_env.json"
    assert s.base_dir == sandbox_dir
    assert s.log_level == "DEBUG"
    assert s.to_options().encryption_key == hex_key.lower()


def test_loads_dotenv_file(sandbox_dir: Path):
    env_file = sandbox_dir / "local.env"
    env_file.write_text("SIMPLEDB_FILE=dotenv.json\n", encoding="utf-8")

    try:
        s = get_settings(str(env_file))
    finally:
        os.environ.pop("SIMPLEDB_FILE", None)
    assert s.db_file == "dotenv.json"


def test_database_from_settings_roundtrip(sandbox_dir: Path, monkeypatch: pytest.MonkeyPatch, hex_key: str):
    monkeypatch.setenv("SIMPLEDB_FILE", "configured.json")
    monkeypatch.setenv("SIMPLEDB_ENCRYPTION_KEY", hex_key)

    async def _run():
        db = Database.from_settings(get_settings())
        await db.set("x", {"y": 1})
        raw = (sandbox_dir / "configured.json").read_text(encoding="utf-8")
        assert not raw.startswith("{")
        assert (await Database("configured.json", encryption_key=hex_key).get("x")).value == {"y": 1}

    asyncio.run(_run())


def test_options_validate_and_redact_key(hex_key: str):
    opts = DatabaseOptions(encryption_key=hex_key)
    assert hex_key not in repr(opts)
    assert "redacted" in repr(opts)

    with pytest.raises(InvalidKeyLengthError):
        DatabaseOptions(encryption_key="not-hex")
    with pytest.raises(InvalidKeyLengthError):
        DatabaseOptions(encryption_key=hex_key[:-2])


def test_configure_logging_accepts_level_names(monkeypatch: pytest.MonkeyPatch):
    import logging

    from simpledb import configure_logging

    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    configure_logging("DEBUG")
    assert calls and calls[0]["level"] == "DEBUG"


def test_invalid_log_level_rejected(sandbox_dir: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SIMPLEDB_LOG_LEVEL", "verbose")
    with pytest.raises(ValueError, match="SIMPLEDB_LOG_LEVEL"):
        get_settings()


def test_from_settings_applies_log_level(sandbox_dir: Path, monkeypatch: pytest.MonkeyPatch):
    import logging

    monkeypatch.setenv("SIMPLEDB_LOG_LEVEL", "debug")
    Database.from_settings(get_settings())

    assert logging.getLogger("simpledb").level == logging.DEBUG
    assert logging.getLogger("simpledb.engine").isEnabledFor(logging.DEBUG)
