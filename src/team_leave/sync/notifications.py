from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.enums import ErrorKind


@dataclass(frozen=True)
class Notification:
    """A user-facing message (what the UI shows as a toast / flash)."""

    level: str
    title: str
    message: str
    kind: Optional[ErrorKind] = None

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"level": self.level, "title": self.title, "message": self.message}
        if self.kind is not None:
            data["kind"] = self.kind.value
        return data


class NotificationLog:
    def __init__(self):
        self._items: List[Notification] = []

    def success(self, message: str, *, title: str = "Success") -> None:
        self._items.append(Notification("success", title, message))

    def error(self, message: str, *, kind: ErrorKind, title: str = "Error") -> None:
        self._items.append(Notification("error", title, message, kind))

    def peek(self) -> List[Notification]:
        return list(self._items)

    def drain(self) -> List[Notification]:
        items, self._items = self._items, []
        return items
