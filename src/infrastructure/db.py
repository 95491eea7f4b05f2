"""Database infrastructure for the net worth tracker.

This module exposes concrete helpers to create and reuse the SQLAlchemy
engine connected to the accounts and balances database. It belongs to the
infrastructure layer because it deals with external systems.
"""

import os
from typing import Optional

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool, StaticPool

from src.application.ports.database import DatabaseEnginePort


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

    Server databases get a small connection pool with health checks.
    In-memory SQLite shares one connection across threads so that store
    calls made from worker threads see the same database.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: A SQLAlchemy engine instance.
    """
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            return create_engine(
                db_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                future=True,
            )
        return create_engine(db_url, future=True)
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_networth_engine: Optional[Engine] = None


def get_networth_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the net worth database.

    Returns:
        Engine: Lazily initialized engine connected to the balance store.
    """
    global _networth_engine
    if _networth_engine is None:
        db_url = _get_env_var("NETWORTH_DB_URL")
        _networth_engine = _create_engine(db_url)
    return _networth_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by a SQLAlchemy engine.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so storage adapters can depend only on the protocol.
    """

    def get_networth_engine(self) -> Engine:
        """Get the engine for the net worth database.

        Returns:
            Engine: SQLAlchemy engine connected to the balance store.
        """
        return get_networth_engine()


__all__ = [
    "get_networth_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
