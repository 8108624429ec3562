from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..common.identifiers import new_row_id
from ..core.exceptions import MutationFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, remote_read, remote_write
from .model import Department
from .repository import DepartmentRepository

_COLUMNS = "id, name, description, created_date"


def row_to_department(row: Dict[str, Any]) -> Department:
    return Department(
        id=str(row["id"]),
        name=row["name"],
        description=row.get("description") or None,
        created_date=normalize_mysql_date(row["created_date"]),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with remote_read("Loading departments"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments ORDER BY name")
            return [row_to_department(r) for r in fetchall(cur)]

    def _get(self, cur, department_id: str) -> Department:
        cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE id=%s", (department_id,))
        row = fetchone(cur)
        if not row:
            raise MutationFailure(f"Department {department_id} not found in database")
        return row_to_department(row)

    def insert(self, *, name: str, description: Optional[str], created_date: date) -> Department:
        department_id = new_row_id()
        with remote_write("Adding department"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO departments(id, name, description, created_date) VALUES(%s,%s,%s,%s)",
                (department_id, name, description, created_date),
            )
            return self._get(cur, department_id)

    def update(self, department_id: str, *, name: str, description: Optional[str]) -> Department:
        with remote_write("Updating department"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE departments SET name=%s, description=%s WHERE id=%s",
                (name, description, department_id),
            )
            return self._get(cur, department_id)

    def delete(self, department_id: str) -> None:
        with remote_write("Deleting department"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE id=%s", (department_id,))
