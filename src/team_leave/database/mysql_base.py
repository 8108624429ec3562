from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector

from ..core.exceptions import BackendError, ConnectionFailure, MutationFailure, SchemaNotProvisioned
from .connection import DatabaseConnection

# MySQL ER_NO_SUCH_TABLE
NO_SUCH_TABLE_ERRNO = 1146


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple]:
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


@contextmanager
def remote_write(action: str) -> Iterator[None]:
    """Translate driver errors raised by a write into MutationFailure."""
    try:
        yield
    except BackendError:
        raise
    except mysql.connector.Error as e:
        if e.errno == NO_SUCH_TABLE_ERRNO:
            raise SchemaNotProvisioned(f"{action} failed: {e}") from e
        raise MutationFailure(f"{action} failed: {e}") from e


@contextmanager
def remote_read(action: str) -> Iterator[None]:
    try:
        yield
    except BackendError:
        raise
    except mysql.connector.Error as e:
        # Tables dropped after the startup probe.
        if e.errno == NO_SUCH_TABLE_ERRNO:
            raise SchemaNotProvisioned(f"{action} failed: {e}") from e
        raise ConnectionFailure(f"{action} failed: {e}") from e


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_date(value: Any) -> Optional[date]:
    """Normalize MySQL DATE values across connector implementations.

    mysql-connector can return DATE as:
    - datetime.date
    - datetime.datetime (DATETIME/TIMESTAMP columns)
    - string (e.g. '2024-12-23')
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()

    raise TypeError(f"Unsupported MySQL DATE value type: {type(value)!r}")
