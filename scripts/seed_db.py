"""Copy the demo departments, members and leave requests into an empty remote database."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from team_leave.core.logging import configure_logging, get_logger
from team_leave.database.connection import DatabaseConnection, DBConfig
from team_leave.departments.mysql_department_repository import MySQLDepartmentRepository
from team_leave.leaves.mysql_leave_repository import MySQLLeaveRequestRepository
from team_leave.members.mysql_member_repository import MySQLTeamMemberRepository
from team_leave.storage.defaults import DEFAULT_DEPARTMENTS, DEFAULT_LEAVE_REQUESTS, DEFAULT_MEMBERS

logger = get_logger("scripts.seed_db")


def seed(conn: DatabaseConnection) -> dict:
    departments = MySQLDepartmentRepository(conn)
    members = MySQLTeamMemberRepository(conn)
    leaves = MySQLLeaveRequestRepository(conn)
    counts = {"departments": 0, "team_members": 0, "leave_requests": 0}

    if not departments.list_all():
        for dept in DEFAULT_DEPARTMENTS:
            departments.insert(name=dept.name, description=dept.description, created_date=dept.created_date)
            counts["departments"] += 1

    if not members.list_all():
        # Default leave requests reference the demo member ids; map them to the new row ids.
        id_map = {}
        for member in DEFAULT_MEMBERS:
            created = members.insert(
                name=member.name, email=member.email, department=member.department, avatar=member.avatar
            )
            id_map[member.id] = created
            counts["team_members"] += 1

        if not leaves.list_all():
            for leave in DEFAULT_LEAVE_REQUESTS:
                owner = id_map[leave.employee_id]
                leaves.insert(
                    employee_name=owner.name,
                    employee_id=owner.id,
                    start_date=leave.start_date,
                    end_date=leave.end_date,
                    leave_type=leave.leave_type,
                    reason=leave.reason,
                    submitted_date=leave.submitted_date,
                )
                counts["leave_requests"] += 1
    return counts


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    url = getattr(settings, "REMOTE_DB_URL", None)
    key = getattr(settings, "REMOTE_DB_KEY", None)
    if not url or not key:
        logger.error("LEAVE_DB_URL and LEAVE_DB_KEY must be set to seed the database")
        return 1

    config = DBConfig.from_url(url, key)
    counts = seed(DatabaseConnection(config))
    logger.info("OK: seeded %s -> %s", config.describe(), counts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
