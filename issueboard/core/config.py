"""Environment-driven configuration for the IssueBoard service and client.

Every knob lives on ``AppSettings`` so the answer to "where does this value
come from?" is always the same: the process environment, then ``.env`` /
``.env.local``, then the defaults below. ``get_settings`` caches a single
instance per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Iterable, Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "IssueBoard"
    APP_ENV: str = "dev"
    BASE_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parent.parent)
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parent.parent / "data")

    # ---- Persistence
    # ``spreadsheet`` keeps one workbook per collection under DATA_DIR,
    # ``sql`` talks to any SQLAlchemy URL (SQLite file by default).
    STORAGE_BACKEND: Literal["spreadsheet", "sql"] = "spreadsheet"
    DB_URL: str = Field(
        default="",
        validation_alias=AliasChoices("DB_URL", "DATABASE_URL"),
    )
    SEED_DEFAULT_PROJECTS: bool = True
    CASCADE_COMMENT_DELETE: bool = False

    # ---- HTTP
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    ALLOWED_ORIGINS: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    LOG_LEVEL: str = "INFO"

    # ---- Client data layer defaults
    API_BASE_URL: str = "http://localhost:3001/api"
    CLIENT_TIMEOUT_SECONDS: float = 10.0
    CLIENT_READ_RETRIES: int = 2
    CLIENT_RETRY_DELAY_SECONDS: float = 1.0
    CLIENT_STALE_SECONDS: float = 30.0

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: Any) -> list[str]:
        if value in (None, "", []):
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Iterable):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("ALLOWED_ORIGINS must be a comma separated string or list")

    @field_validator("CLIENT_READ_RETRIES")
    @classmethod
    def non_negative_retries(cls, value: int) -> int:
        if value < 0:
            raise ValueError("CLIENT_READ_RETRIES must be >= 0")
        return value

    @model_validator(mode="after")
    def default_db_url(self) -> "AppSettings":
        # Without an explicit URL the SQL backend keeps its file next to the workbooks.
        if not self.DB_URL:
            self.DB_URL = f"sqlite:///{self.DATA_DIR / 'issueboard.db'}"
        return self


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return settings
