from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateRecordError, StoreFailureError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def _rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        # The connection is usually gone already; the driver error is re-raised below.
        logger.debug("Rollback failed", exc_info=True)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (connection, cursor); commit on success, roll back on error.

    mysql-connector errors are translated into store errors: a duplicate key
    becomes DuplicateRecordError, anything else StoreFailureError.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise StoreFailureError(f"Database unavailable: {exc}") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as exc:
        _rollback(conn)
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateRecordError(str(exc)) from exc
        raise StoreFailureError(str(exc)) from exc
    except mysql.connector.Error as exc:
        _rollback(conn)
        raise StoreFailureError(str(exc)) from exc
    except Exception:
        _rollback(conn)
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
