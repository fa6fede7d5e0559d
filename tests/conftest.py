import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from issueboard.core.config import AppSettings
from issueboard.db.session import build_engine
from issueboard.storage import SpreadsheetStore, SqlStore


@pytest.fixture()
def settings(tmp_path):
    return AppSettings(
        DATA_DIR=tmp_path,
        STORAGE_BACKEND="spreadsheet",
        ALLOWED_ORIGINS="",
        CLIENT_RETRY_DELAY_SECONDS=0,
        _env_file=None,
    )


@pytest.fixture(params=["spreadsheet", "sql"])
def store(request, tmp_path):
    """Both persistence backends, ready but not seeded."""

    if request.param == "spreadsheet":
        backend = SpreadsheetStore(tmp_path / "data")
    else:
        backend = SqlStore(build_engine("sqlite://"))
    backend.ensure_ready()
    try:
        yield backend
    finally:
        backend.close()
