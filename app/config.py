"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from db.config import env_bool, env_int, env_str

DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class ImportSettings:
    """
    Runtime settings for bulk file imports.
    """

    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    display_error_limit: int = 5
    continue_on_row_error: bool = True
    insert_batch_size: int = 1
    log_validation_errors: bool = True


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@lru_cache(maxsize=1)
def get_import_settings() -> ImportSettings:
    """
    Return cached import settings from environment variables.
    """

    return ImportSettings(
        max_file_bytes=max(1, env_int("IMPORT_MAX_FILE_BYTES", DEFAULT_MAX_FILE_BYTES)),
        display_error_limit=max(0, env_int("IMPORT_DISPLAY_ERROR_LIMIT", 5)),
        continue_on_row_error=env_bool("IMPORT_CONTINUE_ON_ROW_ERROR", True),
        insert_batch_size=max(1, env_int("IMPORT_INSERT_BATCH_SIZE", 1)),
        log_validation_errors=env_bool("IMPORT_LOG_VALIDATION_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings(level=env_str("LOG_LEVEL", "INFO").upper())
