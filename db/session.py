"""
db/session.py

Engine and sessions for the API process.

Nothing connects on import; the engine is built on first use, so tests can
override `get_db` with their own engine without configuring PostgreSQL.
"""

from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from db.config import get_bool_env, get_int_env, resolve_database_url


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    url = make_url(resolve_database_url())
    if url.get_backend_name() != "postgresql":
        raise RuntimeError(f"Only PostgreSQL is supported, got {url.get_backend_name()!r}.")

    return create_engine(
        url,
        echo=get_bool_env("SQL_ECHO", False),
        pool_pre_ping=True,
        pool_size=get_int_env("DB_POOL_SIZE", 5),
        max_overflow=get_int_env("DB_MAX_OVERFLOW", 10),
        pool_recycle=get_int_env("DB_POOL_RECYCLE", 1800),
    )


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    # Objects stay readable after the per-row commit.
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding one session per request."""
    with get_session_factory()() as db:
        yield db
