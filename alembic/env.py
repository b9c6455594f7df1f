"""
alembic/env.py

Migration runner for the bizledger schema. The target database is, in
order: ``alembic -x db_url=...``, ALEMBIC_DATABASE_URL, ``sqlalchemy.url``
in alembic.ini, then the application's own database URL.
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

import db.models  # noqa: F401  registers every table on Base.metadata
from db.base import Base
from db.config import load_env_files, resolve_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def migration_url() -> str:
    load_env_files()
    override = (
        context.get_x_argument(as_dictionary=True).get("db_url")
        or os.getenv("ALEMBIC_DATABASE_URL")
        or config.get_main_option("sqlalchemy.url")
    )
    return resolve_database_url(override)


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(
        url=migration_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(migration_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
