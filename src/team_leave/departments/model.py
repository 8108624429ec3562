from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from ..common.datetime_utils import coerce_date


@dataclass(frozen=True)
class Department:
    id: str
    name: str
    created_date: date
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "createdDate": self.created_date.isoformat(),
        }
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Department":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            created_date=coerce_date(data["createdDate"], "createdDate"),
            description=data.get("description") or None,
        )
