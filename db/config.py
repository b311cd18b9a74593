"""
db/config.py

Environment access shared by the database layer and the application
settings. `.env` and `.env.local` at the project root are read once, and
never override variables already set in the process.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

# Vercel Postgres exposes POSTGRES_URL; plain deployments set DATABASE_URL.
DATABASE_URL_ENV_VARS: tuple[str, ...] = ("DATABASE_URL", "POSTGRES_URL")

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_TRUE_VALUES = {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def load_env_files() -> None:
    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.is_file():
            continue
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            key, separator, value = line.partition("=")
            key = key.strip()
            if separator and key:
                os.environ.setdefault(key, value.strip().strip("\"'"))


def get_str_env(name: str, default: str) -> str:
    load_env_files()
    value = (os.getenv(name) or "").strip()
    return value or default


def get_bool_env(name: str, default: bool) -> bool:
    load_env_files()
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


def get_int_env(name: str, default: int) -> int:
    """
    Read an integer variable; unparseable values fall back to `default`.

    Startup validation in `app.main` reports malformed values before this
    fallback can hide them.
    """

    load_env_files()
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def to_psycopg_url(url: str) -> str:
    """
    Point bare postgres URLs at the psycopg 3 driver.

    >>> to_psycopg_url("postgres://u:p@host/referenciales")
    'postgresql+psycopg://u:p@host/referenciales'
    """

    scheme, separator, rest = url.partition("://")
    if separator and scheme in {"postgres", "postgresql"}:
        return f"postgresql+psycopg://{rest}"
    return url


def resolve_database_url() -> str:
    """
    Return the first configured database URL in `DATABASE_URL_ENV_VARS`.
    """

    for name in DATABASE_URL_ENV_VARS:
        url = get_str_env(name, "")
        if url:
            return to_psycopg_url(url)
    raise RuntimeError(
        "No database URL configured. Set one of: " + ", ".join(DATABASE_URL_ENV_VARS) + "."
    )
