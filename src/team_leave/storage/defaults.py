"""Canonical demo records used on first run in local mode."""

from __future__ import annotations

from datetime import date

from ..core.enums import LeaveType
from ..departments.model import Department
from ..leaves.model import LeaveRequest
from ..members.model import TeamMember

_CREATED = date(2024, 1, 1)

DEFAULT_DEPARTMENTS = (
    Department(
        id="1",
        name="Engineering",
        created_date=_CREATED,
        description=(
            "Responsible for software development, system architecture, and technical infrastructure. "
            "Handles product development and maintains our technology stack."
        ),
    ),
    Department(
        id="2",
        name="Design",
        created_date=_CREATED,
        description=(
            "Creates user experiences, visual designs, and brand materials. "
            "Focuses on user research, prototyping, and design systems."
        ),
    ),
    Department(
        id="3",
        name="Marketing",
        created_date=_CREATED,
        description=(
            "Drives brand awareness, lead generation, and customer acquisition. "
            "Manages campaigns, content creation, and market research."
        ),
    ),
    Department(
        id="4",
        name="HR",
        created_date=_CREATED,
        description=(
            "Manages talent acquisition, employee relations, and organizational development. "
            "Handles benefits, policies, and workplace culture."
        ),
    ),
    Department(
        id="5",
        name="Sales",
        created_date=_CREATED,
        description=(
            "Responsible for revenue generation, client relationships, and business development. "
            "Manages the sales pipeline and customer success."
        ),
    ),
)

DEFAULT_MEMBERS = (
    TeamMember(id="1", name="Alice Johnson", email="alice@company.com", department="Engineering"),
    TeamMember(id="2", name="Bob Smith", email="bob@company.com", department="Design"),
    TeamMember(id="3", name="Carol Davis", email="carol@company.com", department="Marketing"),
    TeamMember(id="4", name="David Wilson", email="david@company.com", department="Engineering"),
    TeamMember(id="5", name="Eva Brown", email="eva@company.com", department="HR"),
)

DEFAULT_LEAVE_REQUESTS = (
    LeaveRequest(
        id="1",
        employee_name="Alice Johnson",
        employee_id="1",
        start_date=date(2024, 12, 23),
        end_date=date(2024, 12, 27),
        leave_type=LeaveType.VACATION,
        reason="Christmas holidays",
        submitted_date=date(2024, 12, 1),
    ),
    LeaveRequest(
        id="2",
        employee_name="Bob Smith",
        employee_id="2",
        start_date=date(2024, 12, 30),
        end_date=date(2025, 1, 2),
        leave_type=LeaveType.VACATION,
        reason="New Year break",
        submitted_date=date(2024, 12, 5),
    ),
    LeaveRequest(
        id="3",
        employee_name="Carol Davis",
        employee_id="3",
        start_date=date(2025, 1, 15),
        end_date=date(2025, 1, 17),
        leave_type=LeaveType.PERSONAL,
        reason="Family event",
        submitted_date=date(2024, 12, 20),
    ),
)
