# backend/tagclaim/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from tagclaim.config import get_settings

_engine = None
_SessionLocal = None


def _use_immediate_transactions(engine: Engine) -> None:
    """Let SQLAlchemy own SQLite transaction boundaries.

    pysqlite defers BEGIN until the first write, which breaks SAVEPOINT and lets two
    readers race to the write lock. Taking the write lock at BEGIN serializes writers,
    which is the row-lock behaviour the claim transaction relies on.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, echo: bool = False, **kwargs) -> Engine:
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(database_url, echo=echo, connect_args=connect_args, **kwargs)
        _use_immediate_transactions(engine)
        return engine
    return create_engine(database_url, echo=echo, pool_pre_ping=True, **kwargs)


def get_engine():
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database_url, echo=settings.database_echo)
    return _engine


def get_session_local():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
