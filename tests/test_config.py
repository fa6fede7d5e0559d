import pytest

from issueboard.core.config import AppSettings
from issueboard.storage import SpreadsheetStore, SqlStore, build_store


def test_origins_and_database_url_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:5173, https://board.example.com")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))

    settings = AppSettings(_env_file=None)

    assert settings.ALLOWED_ORIGINS == ["http://localhost:5173", "https://board.example.com"]
    assert settings.DB_URL == "sqlite://"


def test_sql_url_defaults_into_data_dir(tmp_path):
    settings = AppSettings(DATA_DIR=tmp_path, _env_file=None)
    assert settings.DB_URL == f"sqlite:///{tmp_path / 'issueboard.db'}"


def test_build_store_follows_backend_setting(tmp_path):
    assert isinstance(build_store(AppSettings(DATA_DIR=tmp_path, _env_file=None)), SpreadsheetStore)

    store = build_store(AppSettings(DATA_DIR=tmp_path, STORAGE_BACKEND="sql", _env_file=None))
    try:
        assert isinstance(store, SqlStore)
        store.ensure_ready()
        assert (tmp_path / "issueboard.db").exists()
    finally:
        store.close()


def test_negative_retries_rejected(tmp_path):
    with pytest.raises(ValueError):
        AppSettings(DATA_DIR=tmp_path, CLIENT_READ_RETRIES=-1, _env_file=None)
