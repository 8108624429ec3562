from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TeamMember:
    """Domain entity: TeamMember.

    Note: `department` holds the department *name*, not its id.
    """

    id: str
    name: str
    email: str
    department: str
    avatar: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
        }
        if self.avatar:
            data["avatar"] = self.avatar
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeamMember":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            email=str(data["email"]),
            department=str(data["department"]),
            avatar=data.get("avatar") or None,
        )
