from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_PROBE_TIMEOUT_SECONDS
from .database.connection import BackendHandle, RemoteBackend, open_backend
from .database.prober import BackendProber
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .leaves.mysql_leave_repository import MySQLLeaveRequestRepository
from .members.mysql_member_repository import MySQLTeamMemberRepository
from .storage.local_store import InMemoryStore, JsonFileStore, KeyValueStore, LocalStorageAdapter
from .sync.mediator import SyncMediator


@dataclass(frozen=True)
class Container:
    backend: BackendHandle

    members_repo: Optional[MySQLTeamMemberRepository]
    departments_repo: Optional[MySQLDepartmentRepository]
    leaves_repo: Optional[MySQLLeaveRequestRepository]

    local_storage: LocalStorageAdapter
    prober: BackendProber
    mediator: SyncMediator


def build_container(
    *,
    remote_url: Optional[str],
    remote_key: Optional[str],
    local_storage_dir: Optional[str] = None,
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
    store: Optional[KeyValueStore] = None,
) -> Container:
    backend = open_backend(remote_url, remote_key)

    members_repo = departments_repo = leaves_repo = None
    if isinstance(backend, RemoteBackend):
        members_repo = MySQLTeamMemberRepository(backend.conn)
        departments_repo = MySQLDepartmentRepository(backend.conn)
        leaves_repo = MySQLLeaveRequestRepository(backend.conn)

    if store is None:
        store = JsonFileStore(local_storage_dir) if local_storage_dir else InMemoryStore()
    local_storage = LocalStorageAdapter(store)

    prober = BackendProber(backend, timeout=probe_timeout)
    mediator = SyncMediator(
        prober=prober,
        local=local_storage,
        members_repo=members_repo,
        departments_repo=departments_repo,
        leaves_repo=leaves_repo,
    )

    return Container(
        backend=backend,
        members_repo=members_repo,
        departments_repo=departments_repo,
        leaves_repo=leaves_repo,
        local_storage=local_storage,
        prober=prober,
        mediator=mediator,
    )
