from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict

from ..common.datetime_utils import coerce_date
from ..core.enums import LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: LeaveRequest.

    `employee_name` is a snapshot of the member's name and is rewritten
    whenever that member is renamed. `submitted_date` never changes.
    """

    id: str
    employee_name: str
    employee_id: str
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: str
    submitted_date: date

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "employeeName": self.employee_name,
            "employeeId": self.employee_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "leaveType": self.leave_type.value,
            "reason": self.reason,
            "submittedDate": self.submitted_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaveRequest":
        return cls(
            id=str(data["id"]),
            employee_name=str(data["employeeName"]),
            employee_id=str(data["employeeId"]),
            start_date=coerce_date(data["startDate"], "startDate"),
            end_date=coerce_date(data["endDate"], "endDate"),
            leave_type=LeaveType(data["leaveType"]),
            reason=str(data.get("reason") or ""),
            submitted_date=coerce_date(data["submittedDate"], "submittedDate"),
        )
