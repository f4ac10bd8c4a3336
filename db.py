# db.py
# Role: Database bootstrap for the finance API.
#       Defines the declarative Base and the Database object that owns the
#       SQLAlchemy engine and session factory. One Database is built at process
#       start (see app/main.py:create_app) and handed to every request through
#       app/deps.py:get_db.

"""
Database setup for the finance API.

- Any SQLAlchemy URL is accepted; SQLite is the default.
- For SQLite file databases the parent folder is created if missing.
- Foreign keys are switched on for every SQLite connection.
- SQLite file databases open every transaction with BEGIN IMMEDIATE, so a
  unit holds the write lock from its first statement to commit.
"""

import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Declarative base class for ORM models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _disable_pysqlite_begin(dbapi_connection, connection_record):
    # pysqlite would otherwise emit a deferred BEGIN only before the first write
    dbapi_connection.isolation_level = None


def _begin_immediate(conn):
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(database_url: str) -> Engine:
    """
    Build an engine for the given URL.

    SQLite needs check_same_thread=False because FastAPI runs sync routes in
    a thread pool; in-memory databases additionally share one connection so
    every session sees the same data. File databases take the write lock
    when a transaction begins: reading a balance and writing it back then
    happen under one lock, which SELECT ... FOR UPDATE cannot give on SQLite.
    """
    url = make_url(database_url)

    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}

    in_memory = url.database in (None, "", ":memory:")
    if in_memory:
        kwargs["poolclass"] = StaticPool
    else:
        os.makedirs(os.path.dirname(os.path.abspath(url.database)), exist_ok=True)

    engine = create_engine(database_url, **kwargs)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    # In-memory databases share a single connection, so there is no other
    # writer to lock out
    if not in_memory:
        event.listen(engine, "connect", _disable_pysqlite_begin)
        event.listen(engine, "begin", _begin_immediate)
    return engine


class Database:
    """
    Engine + session factory pair.

    Usage:
        database = Database("sqlite:///finance.db")
        database.create_all()
        with database.session() as db:
            ...
    """

    def __init__(self, database_url: str):
        self.url = database_url
        self.engine = create_db_engine(database_url)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    def create_all(self) -> None:
        # Importing models registers every table on Base.metadata
        import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()
