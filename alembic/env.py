"""
Alembic environment for the referenciales schema.

The target database comes from `-x db_url=...` when given, otherwise from
the same variables the API reads (see `db.config.DATABASE_URL_ENV_VARS`).
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import make_url

import db.models  # noqa: F401 - registers Conservador and Referencial on Base.metadata
from db.base import Base
from db.config import resolve_database_url, to_psycopg_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _migration_url() -> str:
    override = context.get_x_argument(as_dictionary=True).get("db_url")
    url = to_psycopg_url(override) if override else resolve_database_url()
    if make_url(url).get_backend_name() != "postgresql":
        raise RuntimeError("Migrations target PostgreSQL only.")
    return url


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    _configure(url=_migration_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    engine = create_engine(_migration_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        _configure(connection=connection)
