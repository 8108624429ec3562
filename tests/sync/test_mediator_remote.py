from __future__ import annotations

import threading
from datetime import date

import pytest

from team_leave.core.constants import NOT_PROVISIONED_MESSAGE
from team_leave.core.enums import ErrorKind, LeaveType, StorageMode
from team_leave.core.exceptions import SchemaNotProvisioned
from team_leave.database.prober import BackendDecision
from team_leave.departments.model import Department
from team_leave.leaves.model import LeaveRequest
from team_leave.members.model import TeamMember
from team_leave.storage.local_store import LocalStorageAdapter
from team_leave.sync.mediator import SyncMediator

from ..conftest import FIXED_TODAY, FakeDepartmentRepo, FakeLeaveRepo, FakeMemberRepo, StubProber

DEPARTMENTS = [
    Department(id="d-eng", name="Engineering", created_date=date(2024, 5, 1)),
    Department(id="d-ops", name="Ops", created_date=date(2024, 5, 2), description="Operations"),
]
MEMBERS = [
    TeamMember(id="m-ann", name="Ann Lee", email="ann@corp.io", department="Engineering"),
    TeamMember(id="m-raj", name="Raj Patel", email="raj@corp.io", department="Engineering"),
]
LEAVES = [
    LeaveRequest(
        id="l-1",
        employee_name="Ann Lee",
        employee_id="m-ann",
        start_date=date(2025, 3, 3),
        end_date=date(2025, 3, 4),
        leave_type=LeaveType.PERSONAL,
        reason="Moving",
        submitted_date=date(2025, 2, 1),
    )
]


class RemoteSession:
    def __init__(self, store):
        self.members = FakeMemberRepo(MEMBERS)
        self.departments = FakeDepartmentRepo(DEPARTMENTS)
        self.leaves = FakeLeaveRepo(LEAVES)
        self.local = LocalStorageAdapter(store)
        self.mediator = SyncMediator(
            prober=StubProber(BackendDecision.ready()),
            local=self.local,
            members_repo=self.members,
            departments_repo=self.departments,
            leaves_repo=self.leaves,
            clock=lambda: FIXED_TODAY,
        )

    def start(self) -> SyncMediator:
        self.mediator.initialize()
        self.mediator.drain_notifications()
        return self.mediator


@pytest.fixture
def remote(store):
    return RemoteSession(store)


def test_ready_backend_loads_all_three_collections(remote, store):
    mediator = remote.start()

    assert mediator.mode == StorageMode.REMOTE
    assert mediator.is_loaded
    assert mediator.error is None
    assert mediator.banner is None
    assert not mediator.demo_mode
    assert list(mediator.team_members) == MEMBERS
    assert list(mediator.departments) == DEPARTMENTS
    assert list(mediator.leave_requests) == LEAVES
    # Remote sessions never touch local storage.
    assert store.data == {}


def test_the_three_reads_run_concurrently(remote):
    barrier = threading.Barrier(3, timeout=5)
    for repo in (remote.members, remote.departments, remote.leaves):
        repo.list_hook = barrier.wait

    mediator = remote.start()

    assert mediator.mode == StorageMode.REMOTE


@pytest.mark.parametrize(
    "failing, label",
    [("members", "team members"), ("departments", "departments"), ("leaves", "leave requests")],
)
def test_any_failed_read_falls_back_to_local_defaults(remote, failing, label):
    getattr(remote, failing).fail_on.add("list_all")

    mediator = remote.start()

    assert mediator.mode == StorageMode.LOCAL
    assert mediator.error == f"Database error: Failed to load {label}. Using local storage mode."
    # No partially loaded remote data is visible.
    assert all(m.id not in ("m-ann", "m-raj") for m in mediator.team_members)
    assert len(mediator.departments) == 5


def test_added_member_gets_the_backend_id(remote):
    mediator = remote.start()

    member = mediator.add_member(name="Lin Wu", email="lin@corp.io", department="Ops")

    assert member in remote.members.items
    assert mediator.team_members[-1] == member
    assert member.id not in ("m-ann", "m-raj")


def test_rejected_write_leaves_state_untouched_and_stays_remote(remote):
    mediator = remote.start()
    remote.departments.fail_on.add("insert")

    assert mediator.add_department("Finance") is None

    assert mediator.mode == StorageMode.REMOTE
    assert [d.name for d in mediator.departments] == ["Engineering", "Ops"]
    [note] = mediator.drain_notifications()
    assert note.message == "Failed to add department."
    assert note.kind == ErrorKind.MUTATION_FAILURE


def test_duplicate_email_is_refused_without_a_remote_call(remote):
    mediator = remote.start()

    assert mediator.add_member(name="Ann Two", email="Ann@Corp.io", department="Ops") is None
    assert ("insert", "Ann Two") not in remote.members.calls


def test_member_rename_updates_remote_leaves_and_memory(remote):
    mediator = remote.start()

    mediator.edit_member("m-ann", name="Ann Kim", email="ann@corp.io", department="Engineering")

    assert ("rename_employee", "m-ann", "Ann Kim") in remote.leaves.calls
    assert mediator.leave_requests[0].employee_name == "Ann Kim"


def test_failed_leave_rename_restores_the_member(remote):
    mediator = remote.start()
    remote.leaves.fail_on.add("rename_employee")

    assert mediator.edit_member("m-ann", name="Ann Kim", email="ann@corp.io", department="Ops") is None

    updates = [c for c in remote.members.calls if c[0] == "update"]
    assert updates == [("update", "m-ann", "Ann Kim"), ("update", "m-ann", "Ann Lee")]
    restored = next(m for m in remote.members.items if m.id == "m-ann")
    assert (restored.name, restored.department) == ("Ann Lee", "Engineering")
    assert mediator.team_members[0].name == "Ann Lee"


def test_department_rename_moves_members_remotely(remote):
    mediator = remote.start()

    updated = mediator.edit_department("d-eng", "Platform")

    assert updated.name == "Platform"
    assert ("rename_department", "Engineering", "Platform") in remote.members.calls
    assert {m.department for m in mediator.team_members} == {"Platform"}


def test_failed_department_update_moves_members_back(remote):
    mediator = remote.start()
    remote.departments.fail_on.add("update")

    assert mediator.edit_department("d-eng", "Platform") is None

    renames = [c for c in remote.members.calls if c[0] == "rename_department"]
    assert renames == [
        ("rename_department", "Engineering", "Platform"),
        ("rename_department", "Platform", "Engineering"),
    ]
    assert {m.department for m in remote.members.items} == {"Engineering"}
    assert mediator.departments[0].name == "Engineering"


def test_description_only_edit_does_not_touch_members(remote):
    mediator = remote.start()

    mediator.edit_department("d-ops", "Ops", "Keeps things running")

    assert not [c for c in remote.members.calls if c[0] == "rename_department"]


def test_department_still_in_use_is_not_deleted_remotely(remote):
    mediator = remote.start()

    assert mediator.delete_department("d-eng") is False
    assert not [c for c in remote.departments.calls if c[0] == "delete"]


def test_member_delete_drops_their_leaves_from_memory(remote):
    mediator = remote.start()

    assert mediator.delete_member("m-ann") is True

    assert ("delete", "m-ann") in remote.members.calls
    assert mediator.leave_requests == ()


def test_leave_submission_and_edit_go_through_the_backend(remote):
    mediator = remote.start()

    leave = mediator.submit_leave(
        employee_id="m-raj", start_date="2025-04-01", end_date="2025-04-02", leave_type="sick", reason="Dentist"
    )
    edited = mediator.edit_leave(
        leave.id, start_date="2025-04-01", end_date="2025-04-03", leave_type="sick", reason="Dentist"
    )

    assert mediator.leave_requests[0] == edited
    assert edited.days == 3
    assert ("update", leave.id) in remote.leaves.calls


def test_reinitialize_picks_up_remote_changes(remote):
    mediator = remote.start()
    remote.departments.items.append(Department(id="d-new", name="Legal", created_date=FIXED_TODAY))

    mediator.initialize()

    assert [d.name for d in mediator.departments] == ["Engineering", "Ops", "Legal"]


def test_tables_dropped_after_the_check_fall_back_with_setup_instructions(remote):
    def tables_gone():
        raise SchemaNotProvisioned("Loading leave requests failed: Table 'team_leave.leave_requests' doesn't exist")

    remote.leaves.list_hook = tables_gone

    mediator = remote.start()

    assert mediator.mode == StorageMode.LOCAL
    assert mediator.error == NOT_PROVISIONED_MESSAGE


def test_write_against_a_missing_table_is_reported_with_its_kind(remote):
    mediator = remote.start()

    def insert(**fields):
        raise SchemaNotProvisioned("Adding department failed")

    remote.departments.insert = insert

    assert mediator.add_department("Finance") is None
    assert mediator.mode == StorageMode.REMOTE
    [note] = mediator.drain_notifications()
    assert note.kind == ErrorKind.SCHEMA_NOT_PROVISIONED
    assert note.message == "Failed to add department."
