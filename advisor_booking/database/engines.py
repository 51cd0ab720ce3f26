"""Database engine factory with per-dialect locking behaviour."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

logger = logging.getLogger(__name__)


def _sqlite_engine(db_url: str, lock_timeout_seconds: float, **kwargs: Any) -> Engine:
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False, "timeout": lock_timeout_seconds},
        **kwargs,
    )

    # pysqlite defers BEGIN until the first write, so two transactions could both
    # read a slot as free. Taking the write lock at BEGIN makes every transaction
    # read state only after it holds the lock.
    @event.listens_for(engine, "connect")  # type: ignore[untyped-decorator]
    def _on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        logger.debug("SQLite connection established")

    @event.listens_for(engine, "begin")  # type: ignore[untyped-decorator]
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def _server_engine(
    db_url: str,
    lock_timeout_seconds: float,
    *,
    pool_size: int,
    max_overflow: int,
    **kwargs: Any,
) -> Engine:
    lock_timeout_ms = int(lock_timeout_seconds * 1000)
    connect_args: dict[str, Any] = {"connect_timeout": 5}
    if make_url(db_url).get_backend_name() == "postgresql":
        # Row-lock waits and runaway statements abort the transaction instead of hanging.
        connect_args["options"] = (
            f"-c lock_timeout={lock_timeout_ms} -c statement_timeout={lock_timeout_ms * 3}"
        )

    engine = create_engine(
        db_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=300,
        connect_args=connect_args,
        **kwargs,
    )

    @event.listens_for(engine, "connect")  # type: ignore[untyped-decorator]
    def _on_connect(_dbapi_connection: Any, _connection_record: Any) -> None:
        logger.debug("Database connection established")

    @event.listens_for(engine, "invalidate")  # type: ignore[untyped-decorator]
    def _on_invalidate(_dbapi_connection: Any, _connection_record: Any, exception: Any) -> None:
        logger.warning("Database connection invalidated: %s", exception)

    return engine


def build_engine(
    db_url: str,
    *,
    lock_timeout_seconds: float = 10.0,
    pool_size: int = 5,
    max_overflow: int = 10,
    echo: bool = False,
) -> Engine:
    """Create an engine for ``db_url`` with the locking settings booking transactions rely on."""
    if make_url(db_url).get_backend_name() == "sqlite":
        return _sqlite_engine(db_url, lock_timeout_seconds, echo=echo)
    return _server_engine(
        db_url,
        lock_timeout_seconds,
        pool_size=pool_size,
        max_overflow=max_overflow,
        echo=echo,
    )
