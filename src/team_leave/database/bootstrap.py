"""Provision the remote database from database/schema.sql."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, List

import mysql.connector

from ..core.logging import get_logger
from .connection import DBConfig

logger = get_logger(__name__)

_CREATE_DB_OR_USE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")
# Quoted strings are matched whole so a ';' inside them never ends a statement.
_TOKEN = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|;|[^'\";]+", re.S)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a schema script on top-level semicolons.

    ``CREATE DATABASE`` / ``USE`` lines and ``--`` comment lines are dropped so the
    script runs against whatever database the config names.
    """
    sql = _LINE_COMMENT.sub("", _CREATE_DB_OR_USE.sub("", sql))
    current: List[str] = []
    for token in _TOKEN.findall(sql):
        if token == ";":
            statement = "".join(current).strip()
            current = []
            if statement:
                yield statement
        else:
            current.append(token)
    tail = "".join(current).strip()
    if tail:
        yield tail


def _connect(config: DBConfig, *, with_database: bool = True):
    kwargs = {"host": config.host, "port": config.port, "user": config.user, "password": config.password}
    if with_database:
        kwargs["database"] = config.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(config: DBConfig) -> None:
    conn = _connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(config: DBConfig, *, schema_path: str | Path) -> int:
    """Apply schema.sql (idempotent). Returns the number of statements executed."""
    ensure_database_exists(config)
    statements = list(iter_sql_statements(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connect(config)
    try:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    logger.info("applied %d statements from %s to %s", len(statements), Path(schema_path).name, config.describe())
    return len(statements)


def list_tables(config: DBConfig) -> List[str]:
    conn = _connect(config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
