from __future__ import annotations

from datetime import date

from team_leave.leaves.queries import (
    leaves_for_member,
    leaves_on,
    members_in_department,
    total_leave_days,
    upcoming_leaves,
)
from team_leave.storage.defaults import DEFAULT_LEAVE_REQUESTS, DEFAULT_MEMBERS


def test_leaves_on_uses_inclusive_range():
    assert [leave.id for leave in leaves_on(date(2024, 12, 27), DEFAULT_LEAVE_REQUESTS)] == ["1"]
    assert [leave.id for leave in leaves_on(date(2025, 1, 2), DEFAULT_LEAVE_REQUESTS)] == ["2"]
    assert leaves_on(date(2024, 12, 28), DEFAULT_LEAVE_REQUESTS) == []


def test_upcoming_leaves_start_today_or_later_sorted_and_limited():
    assert [leave.id for leave in upcoming_leaves(DEFAULT_LEAVE_REQUESTS, today=date(2024, 12, 23))] == ["1", "2", "3"]
    assert [leave.id for leave in upcoming_leaves(DEFAULT_LEAVE_REQUESTS, today=date(2024, 12, 24), limit=1)] == ["2"]
    assert upcoming_leaves(DEFAULT_LEAVE_REQUESTS, today=date(2025, 6, 1)) == []


def test_member_totals():
    alice_leaves = leaves_for_member("1", DEFAULT_LEAVE_REQUESTS)

    assert total_leave_days(alice_leaves) == 5
    assert total_leave_days(leaves_for_member("2", DEFAULT_LEAVE_REQUESTS)) == 4
    assert total_leave_days([]) == 0


def test_members_in_department_matches_exact_name():
    assert [m.name for m in members_in_department("Engineering", DEFAULT_MEMBERS)] == ["Alice Johnson", "David Wilson"]
    assert members_in_department("engineering", DEFAULT_MEMBERS) == []
