"""Database infrastructure for the financial-data explorer.

This module exposes helpers to create and reuse the SQLAlchemy engine
connected to the database holding code definitions, financial records and
scaling metrics. It belongs to the infrastructure layer because it deals
with external systems.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.pool import QueuePool

from finexplorer.application.ports.database import DatabaseEnginePort

FINANCE_DB_URL_ENV = "FINANCE_DB_URL"


def _get_env_var(name: str) -> str:
    """Read an environment variable or raise a descriptive error.

    Args:
        name: Name of the environment variable to read.

    Returns:
        str: The raw value of the environment variable.

    Raises:
        RuntimeError: If the environment variable is missing or empty.
    """
    dotenv.load_dotenv()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing environment variable: {name}")
    return value


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine.

    Args:
        db_url: Fully qualified database URL.

    Returns:
        Engine: Engine with health checks enabled. Server databases get a
        small connection pool; SQLite files use SQLAlchemy's default pool.
    """
    if make_url(db_url).get_backend_name() == "sqlite":
        return create_engine(db_url, future=True)
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_finance_engine: Optional[Engine] = None


def get_finance_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the finance database.

    Returns:
        Engine: Lazily initialized engine.
    """
    global _finance_engine
    if _finance_engine is None:
        db_url = _get_env_var(FINANCE_DB_URL_ENV)
        _finance_engine = _create_engine(db_url)
    return _finance_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so use cases depend only on the protocol. An explicit
    engine can be injected, which tests use with in-memory SQLite.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine

    def get_finance_engine(self) -> Engine:
        """Get the engine for the finance database.

        Returns:
            Engine: Injected engine, or the process-wide singleton.
        """
        if self._engine is not None:
            return self._engine
        return get_finance_engine()


__all__ = [
    "FINANCE_DB_URL_ENV",
    "get_finance_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
