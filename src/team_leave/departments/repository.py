from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Department


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def insert(self, *, name: str, description: Optional[str], created_date: date) -> Department:
        raise NotImplementedError

    def update(self, department_id: str, *, name: str, description: Optional[str]) -> Department:
        raise NotImplementedError

    def delete(self, department_id: str) -> None:
        raise NotImplementedError
