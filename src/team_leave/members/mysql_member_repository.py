from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.identifiers import new_row_id
from ..core.exceptions import MutationFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, remote_read, remote_write
from .model import TeamMember
from .repository import TeamMemberRepository

_COLUMNS = "id, name, email, department, avatar_url"


def row_to_member(row: Dict[str, Any]) -> TeamMember:
    return TeamMember(
        id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        department=row["department"],
        avatar=row.get("avatar_url") or None,
    )


class MySQLTeamMemberRepository(TeamMemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[TeamMember]:
        with remote_read("Loading team members"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM team_members ORDER BY name")
            return [row_to_member(r) for r in fetchall(cur)]

    def _get(self, cur, member_id: str) -> TeamMember:
        cur.execute(f"SELECT {_COLUMNS} FROM team_members WHERE id=%s", (member_id,))
        row = fetchone(cur)
        if not row:
            raise MutationFailure(f"Team member {member_id} not found in database")
        return row_to_member(row)

    def insert(self, *, name: str, email: str, department: str, avatar: Optional[str] = None) -> TeamMember:
        member_id = new_row_id()
        with remote_write("Adding team member"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO team_members(id, name, email, department, avatar_url)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (member_id, name, email, department, avatar),
            )
            return self._get(cur, member_id)

    def update(
        self,
        member_id: str,
        *,
        name: str,
        email: str,
        department: str,
        avatar: Optional[str] = None,
    ) -> TeamMember:
        with remote_write("Updating team member"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE team_members
                SET name=%s, email=%s, department=%s, avatar_url=%s
                WHERE id=%s
                """,
                (name, email, department, avatar, member_id),
            )
            return self._get(cur, member_id)

    def delete(self, member_id: str) -> None:
        # leave_requests rows go with it (ON DELETE CASCADE).
        with remote_write("Deleting team member"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM team_members WHERE id=%s", (member_id,))

    def rename_department(self, *, old_name: str, new_name: str) -> int:
        with remote_write("Moving team members to renamed department"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE team_members SET department=%s WHERE department=%s",
                (new_name, old_name),
            )
            return int(cur.rowcount or 0)
