from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


class TransactionScope:
    """Lets several repository calls share one connection and commit once.

    Outside ``begin()`` every ``cursor()`` gets its own short-lived connection, as ``db_cursor`` does.
    Nested ``begin()`` blocks join the outer transaction. The open connection is held per thread,
    so concurrent requests never share a transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._local = threading.local()

    @property
    def _conn(self):
        return getattr(self._local, "conn", None)

    @property
    def active(self) -> bool:
        return self._conn is not None

    @contextmanager
    def begin(self) -> Iterator[None]:
        if self._conn is not None:
            yield
            return

        conn = self._conn_factory.connect()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()

    @contextmanager
    def cursor(self, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
        conn = self._conn
        if conn is None:
            with db_cursor(self._conn_factory, dictionary=dictionary) as pair:
                yield pair
            return

        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
        finally:
            cur.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
