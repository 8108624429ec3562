from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TeamMember


class TeamMemberRepository(Protocol):
    """Remote repository interface for TeamMember.

    Note (DIP): the sync mediator depends on this interface, not on a concrete DB.
    """

    def list_all(self) -> Sequence[TeamMember]:
        raise NotImplementedError

    def insert(self, *, name: str, email: str, department: str, avatar: Optional[str] = None) -> TeamMember:
        raise NotImplementedError

    def update(
        self,
        member_id: str,
        *,
        name: str,
        email: str,
        department: str,
        avatar: Optional[str] = None,
    ) -> TeamMember:
        raise NotImplementedError

    def delete(self, member_id: str) -> None:
        raise NotImplementedError

    def rename_department(self, *, old_name: str, new_name: str) -> int:
        """Move every member of `old_name` to `new_name`; returns affected rows."""

        raise NotImplementedError
