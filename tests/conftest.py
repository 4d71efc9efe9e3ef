from __future__ import annotations

import os
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def sandbox_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Run each test from a temp working directory so database files never land in the repo.
    """
    monkeypatch.chdir(tmp_path)
    for name in ("SIMPLEDB_FILE", "SIMPLEDB_ENCRYPTION_KEY", "SIMPLEDB_BASE_DIR", "SIMPLEDB_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def hex_key() -> str:
    return os.urandom(32).hex()


@pytest.fixture
def other_hex_key() -> str:
    return os.urandom(32).hex()


@pytest.fixture(autouse=True)
def restore_package_log_level():
    import logging

    logger = logging.getLogger("simpledb")
    level = logger.level
    yield
    logger.setLevel(level)
