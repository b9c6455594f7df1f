"""
db/config.py

Environment access for bizledger and the database settings built from it.

`.env.local` then `.env` at the project root are loaded once; variables
already set in the process environment always win.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_FILES = (".env.local", ".env")

# First non-empty variable wins.
DATABASE_URL_VARS = ("BIZLEDGER_DATABASE_URL", "DATABASE_URL")

_PSYCOPG_SCHEMES = {"postgres", "postgresql"}


@lru_cache(maxsize=1)
def load_env_files() -> None:
    for filename in ENV_FILES:
        load_dotenv(PROJECT_ROOT / filename, override=False)


def env_str(name: str, default: str) -> str:
    load_env_files()
    value = (os.getenv(name) or "").strip()
    return value or default


def env_bool(name: str, default: bool) -> bool:
    load_env_files()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    load_env_files()
    try:
        return int(os.getenv(name, ""))
    except ValueError:
        return default


def to_psycopg_url(url: str) -> str:
    """
    ``postgres://`` and ``postgresql://`` become ``postgresql+psycopg://``.
    URLs that already name a driver are returned unchanged.
    """

    scheme, separator, rest = url.partition("://")
    if separator and scheme in _PSYCOPG_SCHEMES:
        return f"postgresql+psycopg://{rest}"
    return url


def resolve_database_url(override: str | None = None) -> str:
    """
    Database URL from ``override`` or the first of DATABASE_URL_VARS.

    Raises RuntimeError when nothing is configured or the URL is not
    PostgreSQL; the models rely on UUID and JSONB columns.
    """

    load_env_files()
    candidates = [override, *(os.getenv(name) for name in DATABASE_URL_VARS)]
    raw_url = next((value.strip() for value in candidates if value and value.strip()), None)
    if raw_url is None:
        raise RuntimeError(
            "No database URL configured. Set " + " or ".join(DATABASE_URL_VARS) + "."
        )

    url = to_psycopg_url(raw_url)
    if not url.startswith("postgresql"):
        raise RuntimeError("Database URL must point at PostgreSQL.")
    return url


@dataclass(frozen=True)
class DatabaseSettings:
    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle_seconds: int = 1800


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
    return DatabaseSettings(
        url=resolve_database_url(),
        echo=env_bool("SQL_ECHO", False),
        pool_size=max(1, env_int("DB_POOL_SIZE", 5)),
        max_overflow=max(0, env_int("DB_MAX_OVERFLOW", 10)),
        pool_recycle_seconds=env_int("DB_POOL_RECYCLE", 1800),
    )
