"""
Module: procurement_kernel.db.engine
Responsibility: Engine and session lifecycle for the catalog database.
    One process-wide engine; sessions are handed out either as a writable
    transaction (``session_scope``, used by the ERP sync and offer edits) or
    as a read-only snapshot (``read_session``, used by pricing queries).
Architecture position: Kernel > DB.  May import db/base.py; create_tables
    and drop_tables import models/ so the metadata is complete.

Invariants enforced:
    - PostgreSQL runs at READ COMMITTED with a pre-pinged QueuePool.  A
      pricing request reads its whole snapshot inside one transaction.
    - SQLite (tests, local runs) shares one connection through StaticPool
      and has foreign keys switched on, so ON DELETE CASCADE behaves as in
      PostgreSQL.
    - ``read_session`` never commits.

Failure modes:
    - RuntimeError when a session or the engine is requested before
      init_engine_from_url().
"""

from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from procurement_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _engine_options(
    dialect: str,
    pool_size: int,
    max_overflow: int,
    pool_pre_ping: bool,
    pool_recycle: int,
) -> dict[str, Any]:
    if dialect == "sqlite":
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": pool_pre_ping,
        "pool_recycle": pool_recycle,
        "isolation_level": "READ COMMITTED",
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 10,
    max_overflow: int = 5,
    pool_pre_ping: bool = True,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create the process-wide engine and session factory.

    A second call replaces the first; the previous engine is disposed.

    Args:
        database_url: ``postgresql://...`` or ``sqlite://...``.
        echo: Log every SQL statement.
        pool_size, max_overflow, pool_pre_ping, pool_recycle: QueuePool
            settings, ignored for SQLite.
    """
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()

    dialect = make_url(database_url).get_backend_name()
    _engine = create_engine(
        database_url,
        echo=echo,
        **_engine_options(dialect, pool_size, max_overflow, pool_pre_ping, pool_recycle),
    )
    if dialect == "sqlite":
        event.listen(_engine, "connect", _enable_sqlite_foreign_keys)

    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info("engine_initialized", extra={"dialect": dialect, "echo": echo})
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory


def get_session() -> Session:
    """A new session; the caller owns commit/rollback/close."""
    return get_session_factory()()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Writable transaction: commit on success, roll back and re-raise on error.

    Usage:
        with session_scope() as session:
            OfferService(session).upsert_offer(...)
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


@contextmanager
def read_session() -> Generator[Session, None, None]:
    """
    Read-only snapshot for pricing queries; always rolled back.

    Usage:
        with read_session() as session:
            pricing_service(session).order_pricing_matrix(account_id, ids)
    """
    session = get_session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def create_tables() -> None:
    from procurement_kernel.db.base import Base
    import procurement_kernel.models  # noqa: F401

    Base.metadata.create_all(get_engine())


def drop_tables() -> None:
    """Drop all tables.  Tests only."""
    from procurement_kernel.db.base import Base
    import procurement_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory.  Tests only."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None
