"""Read-side helpers for the calendar and team overview views."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List

from ..core.constants import DEFAULT_UPCOMING_LIMIT
from ..members.model import TeamMember
from .model import LeaveRequest


def leaves_on(day: date, leaves: Iterable[LeaveRequest]) -> List[LeaveRequest]:
    """Requests whose inclusive date range covers `day`."""
    return [leave for leave in leaves if leave.covers(day)]


def upcoming_leaves(
    leaves: Iterable[LeaveRequest], *, today: date, limit: int = DEFAULT_UPCOMING_LIMIT
) -> List[LeaveRequest]:
    upcoming = [leave for leave in leaves if leave.start_date >= today]
    upcoming.sort(key=lambda leave: leave.start_date)
    return upcoming[:limit]


def leaves_for_member(member_id: str, leaves: Iterable[LeaveRequest]) -> List[LeaveRequest]:
    return [leave for leave in leaves if leave.employee_id == member_id]


def total_leave_days(leaves: Iterable[LeaveRequest]) -> int:
    return sum(leave.days for leave in leaves)


def members_in_department(name: str, members: Iterable[TeamMember]) -> List[TeamMember]:
    return [member for member in members if member.department == name]
