from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from overtime_tracker.core.config import settings

READ_ONLY = "overtime_read_only"


def serialize_sqlite_writers(engine: Engine) -> Engine:
    """Open every SQLite write transaction with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, so two sessions can both read
    and then both try to upgrade their lock. Taking the write lock up front
    makes competing transactions wait on the busy timeout instead. Sessions
    marked with ``begin_read_only`` take a plain deferred BEGIN and never queue
    behind writers.
    """
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        if conn.get_execution_options().get(READ_ONLY):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def begin_read_only(db: Session) -> None:
    """Start the session's transaction as a reader; it must not write."""
    db.connection(execution_options={READ_ONLY: True})


engine = serialize_sqlite_writers(create_engine(settings.database_url, pool_pre_ping=True))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_session() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
