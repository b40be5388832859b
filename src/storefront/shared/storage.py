"""Direct SQL access beneath protean repositories.

Stock counters and id sequences change through single conditional
statements rather than load-modify-save, so a few repositories reach past
the DAO to its SQLAlchemy table and session. ``session_for`` hands out the
active unit of work's session, so those statements commit or roll back with
everything else the handler did.

SQLite write transactions are opened with ``BEGIN IMMEDIATE``: the write lock
is taken up front, which serializes writers instead of failing one of them
when two readers race to upgrade their lock.
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from protean.utils.globals import current_uow
from sqlalchemy import Table, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session


@event.listens_for(Engine, "connect")
def _on_sqlite_connect(dbapi_connection, connection_record):
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    # SQLAlchemy emits BEGIN itself instead of pysqlite.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA busy_timeout = 30000")
    cursor.close()


@event.listens_for(Engine, "begin")
def _on_sqlite_begin(conn):
    if conn.dialect.name == "sqlite":
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def table_for(repository) -> Table:
    """The SQLAlchemy table backing a repository's aggregate."""
    return repository._dao.database_model_cls.__table__


@contextmanager
def session_for(repository) -> Iterator[Session]:
    """Yield the session a repository's DAO writes through.

    Inside a unit of work this is the unit's own session, flushed first so
    direct statements see its pending writes, and left for the unit to
    commit. Outside one, a fresh session is committed (or rolled back) and
    closed around the block.
    """
    session = repository._dao._get_session()
    if current_uow:
        session.flush()
        yield session
        return

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
