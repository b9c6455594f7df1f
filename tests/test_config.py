"""
tests/test_config.py

Environment-driven settings for the database and import pipeline.
"""

from __future__ import annotations

import pytest

from app.config import get_import_settings, get_logging_settings
from db.config import get_database_settings, resolve_database_url, to_psycopg_url


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for name in ("BIZLEDGER_DATABASE_URL", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    get_import_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_database_settings.cache_clear()
    yield
    get_import_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_database_settings.cache_clear()


class TestDatabaseUrl:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("postgres://u:p@db/ledger", "postgresql+psycopg://u:p@db/ledger"),
            ("postgresql://u:p@db/ledger", "postgresql+psycopg://u:p@db/ledger"),
            ("postgresql+psycopg://u:p@db/ledger", "postgresql+psycopg://u:p@db/ledger"),
        ],
    )
    def test_driver_is_pinned_to_psycopg(self, raw: str, expected: str) -> None:
        assert to_psycopg_url(raw) == expected

    def test_project_variable_wins_over_generic_one(self, monkeypatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql://generic/db")
        monkeypatch.setenv("BIZLEDGER_DATABASE_URL", "postgresql://ledger/db")

        assert resolve_database_url() == "postgresql+psycopg://ledger/db"

    def test_explicit_override_wins(self, monkeypatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql://generic/db")
        assert resolve_database_url("postgres://cli/db") == "postgresql+psycopg://cli/db"

    def test_missing_url(self) -> None:
        with pytest.raises(RuntimeError, match="No database URL configured"):
            resolve_database_url()

    def test_sqlite_is_rejected(self, monkeypatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "sqlite:///ledger.db")
        with pytest.raises(RuntimeError, match="PostgreSQL"):
            resolve_database_url()

    def test_pool_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql://db/ledger")
        monkeypatch.setenv("DB_POOL_SIZE", "0")
        monkeypatch.setenv("SQL_ECHO", "yes")
        monkeypatch.delenv("DB_MAX_OVERFLOW", raising=False)

        settings = get_database_settings()

        assert settings.pool_size == 1
        assert settings.echo is True
        assert settings.max_overflow == 10


class TestImportSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in ("IMPORT_MAX_FILE_BYTES", "IMPORT_INSERT_BATCH_SIZE", "IMPORT_CONTINUE_ON_ROW_ERROR"):
            monkeypatch.delenv(name, raising=False)

        settings = get_import_settings()

        assert settings.max_file_bytes == 10 * 1024 * 1024
        assert settings.insert_batch_size == 1
        assert settings.continue_on_row_error is True

    def test_overrides_and_bad_values(self, monkeypatch) -> None:
        monkeypatch.setenv("IMPORT_MAX_FILE_BYTES", "2048")
        monkeypatch.setenv("IMPORT_INSERT_BATCH_SIZE", "lots")
        monkeypatch.setenv("IMPORT_CONTINUE_ON_ROW_ERROR", "off")

        settings = get_import_settings()

        assert settings.max_file_bytes == 2048
        assert settings.insert_batch_size == 1
        assert settings.continue_on_row_error is False

    def test_log_level_is_upper_cased(self, monkeypatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", " debug ")
        assert get_logging_settings().level == "DEBUG"
