"""
db/session.py

Engine and per-request sessions. Nothing connects until first use, so
importing this module never needs a configured database.
"""

from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import get_database_settings


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    settings = get_database_settings()
    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_recycle=settings.pool_recycle_seconds,
    )


@lru_cache(maxsize=1)
def _session_factory() -> sessionmaker[Session]:
    # Import results are read back after commit, so keep attributes loaded.
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def SessionLocal() -> Session:
    return _session_factory()()


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency: one session per request, rolled back if the
    request handler raises.
    """

    session = SessionLocal()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
