from __future__ import annotations

from datetime import date
from typing import Any, Dict, Sequence

from ..common.identifiers import new_row_id
from ..core.enums import LeaveType
from ..core.exceptions import MutationFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, remote_read, remote_write
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_COLUMNS = "id, employee_name, employee_id, start_date, end_date, leave_type, reason, submitted_date"


def row_to_leave(row: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        id=str(row["id"]),
        employee_name=row["employee_name"],
        employee_id=str(row["employee_id"]),
        start_date=normalize_mysql_date(row["start_date"]),
        end_date=normalize_mysql_date(row["end_date"]),
        leave_type=LeaveType(row["leave_type"]),
        reason=row.get("reason") or "",
        submitted_date=normalize_mysql_date(row["submitted_date"]),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[LeaveRequest]:
        with remote_read("Loading leave requests"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests ORDER BY start_date DESC")
            return [row_to_leave(r) for r in fetchall(cur)]

    def _get(self, cur, leave_id: str) -> LeaveRequest:
        cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE id=%s", (leave_id,))
        row = fetchone(cur)
        if not row:
            raise MutationFailure(f"Leave request {leave_id} not found in database")
        return row_to_leave(row)

    def insert(
        self,
        *,
        employee_name: str,
        employee_id: str,
        start_date: date,
        end_date: date,
        leave_type: LeaveType,
        reason: str,
        submitted_date: date,
    ) -> LeaveRequest:
        leave_id = new_row_id()
        with remote_write("Submitting leave request"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    id, employee_name, employee_id, start_date, end_date, leave_type, reason, submitted_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    leave_id,
                    employee_name,
                    employee_id,
                    start_date,
                    end_date,
                    leave_type.value,
                    reason,
                    submitted_date,
                ),
            )
            return self._get(cur, leave_id)

    def update(
        self,
        leave_id: str,
        *,
        start_date: date,
        end_date: date,
        leave_type: LeaveType,
        reason: str,
    ) -> LeaveRequest:
        with remote_write("Updating leave request"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET start_date=%s, end_date=%s, leave_type=%s, reason=%s
                WHERE id=%s
                """,
                (start_date, end_date, leave_type.value, reason, leave_id),
            )
            return self._get(cur, leave_id)

    def delete(self, leave_id: str) -> None:
        with remote_write("Deleting leave request"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE id=%s", (leave_id,))

    def rename_employee(self, *, employee_id: str, employee_name: str) -> int:
        with remote_write("Updating employee name on leave requests"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_requests SET employee_name=%s WHERE employee_id=%s",
                (employee_name, employee_id),
            )
            return int(cur.rowcount or 0)
