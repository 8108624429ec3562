from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from ..core.enums import LeaveType
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def list_all(self) -> Sequence[LeaveRequest]:
        """All requests, most recent start date first."""

        raise NotImplementedError

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
        raise NotImplementedError

    def update(
        self,
        leave_id: str,
        *,
        start_date: date,
        end_date: date,
        leave_type: LeaveType,
        reason: str,
    ) -> LeaveRequest:
        raise NotImplementedError

    def delete(self, leave_id: str) -> None:
        raise NotImplementedError

    def rename_employee(self, *, employee_id: str, employee_name: str) -> int:
        raise NotImplementedError
