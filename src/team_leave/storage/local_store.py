"""Local persistence: three JSON collections in a durable key-value store."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from ..core.enums import Collection
from ..core.logging import get_logger
from ..departments.model import Department
from ..leaves.model import LeaveRequest
from ..members.model import TeamMember
from .defaults import DEFAULT_DEPARTMENTS, DEFAULT_LEAVE_REQUESTS, DEFAULT_MEMBERS

logger = get_logger(__name__)

_DECODERS: Dict[Collection, Callable[[dict], object]] = {
    Collection.TEAM_MEMBERS: TeamMember.from_dict,
    Collection.LEAVE_REQUESTS: LeaveRequest.from_dict,
    Collection.DEPARTMENTS: Department.from_dict,
}


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class InMemoryStore:
    """Process-local store, used by tests and by the testing settings."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """One file per key under a directory; survives restarts."""

    def __init__(self, directory: str | Path):
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        # Readers only ever see a complete file.
        fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, self._path(key))
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class LocalStorageAdapter:
    """Stateless translator between domain collections and the key-value store.

    `store=None` means no durable storage is available in this process: saves are
    no-ops and loads return empty collections.
    """

    def __init__(self, store: Optional[KeyValueStore]):
        self._store = store

    @property
    def available(self) -> bool:
        return self._store is not None

    def save(self, collection: Collection, items: Sequence) -> None:
        if self._store is None:
            return
        payload = json.dumps([item.to_dict() for item in items], ensure_ascii=False)
        self._store.set(collection.value, payload)

    def load(self, collection: Collection) -> List:
        if self._store is None:
            return []
        try:
            raw = self._store.get(collection.value)
            if not raw:
                return []
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            decode = _DECODERS[collection]
            return [decode(item) for item in data]
        except Exception as e:
            logger.warning("could not read %s from local storage: %s", collection.value, e)
            return []

    def load_members(self) -> List[TeamMember]:
        return self.load(Collection.TEAM_MEMBERS)

    def load_departments(self) -> List[Department]:
        return self.load(Collection.DEPARTMENTS)

    def load_leave_requests(self) -> List[LeaveRequest]:
        return self.load(Collection.LEAVE_REQUESTS)

    def initialize_defaults(self) -> List[Collection]:
        """Seed the canonical records on first run.

        First run means all three collections are empty. Once any of them holds
        data, nothing is seeded, so default leave requests can never point at
        members the user already deleted. Returns the collections that were seeded.
        """
        if self._store is None:
            return []

        seeds = (
            (Collection.DEPARTMENTS, DEFAULT_DEPARTMENTS),
            (Collection.TEAM_MEMBERS, DEFAULT_MEMBERS),
            (Collection.LEAVE_REQUESTS, DEFAULT_LEAVE_REQUESTS),
        )
        if any(self.load(collection) for collection, _ in seeds):
            return []

        for collection, defaults in seeds:
            self.save(collection, defaults)
        logger.info("first run: seeded default data into %s", [c.value for c, _ in seeds])
        return [c for c, _ in seeds]
