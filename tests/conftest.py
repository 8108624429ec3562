from __future__ import annotations

import re
from dataclasses import replace
from datetime import date
from typing import Callable, Optional

import pytest

from team_leave.common.identifiers import new_row_id
from team_leave.core.exceptions import ConnectionFailure, MutationFailure
from team_leave.database.prober import BackendDecision
from team_leave.departments.model import Department
from team_leave.leaves.model import LeaveRequest
from team_leave.members.model import TeamMember
from team_leave.storage.local_store import InMemoryStore, LocalStorageAdapter
from team_leave.sync.mediator import SyncMediator

FIXED_TODAY = date(2025, 1, 10)


def _squash(sql: str) -> str:
    return re.sub(r"\s+", " ", sql).strip()


class FakeCursor:
    def __init__(self, conn: "FakeConnection"):
        self._conn = conn
        self._rows: list = []
        self.rowcount = 0
        self.closed = False

    def execute(self, sql, params=None):
        sql = _squash(sql)
        self._conn.factory.statements.append((sql, tuple(params or ())))
        result = self._conn.factory.handler(sql, tuple(params or ()))
        if isinstance(result, BaseException):
            raise result
        if isinstance(result, int):
            self._rows, self.rowcount = [], result
        else:
            self._rows = list(result or [])
            self.rowcount = len(self._rows)

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, factory: "FakeConnectionFactory"):
        self.factory = factory
        self.committed = 0
        self.rolled_back = 0
        self.closed = False

    def cursor(self, dictionary: bool = False):
        return FakeCursor(self)

    def commit(self):
        self.committed += 1

    def rollback(self):
        self.rolled_back += 1

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    """Stands in for DatabaseConnection; `handler(sql, params)` scripts the database.

    The handler returns rows (list of dicts), an affected-row count (int), or an
    exception instance to raise.
    """

    def __init__(self, handler: Optional[Callable] = None, *, connect_error: Optional[Exception] = None):
        self.handler = handler or (lambda sql, params: [])
        self.connect_error = connect_error
        self.statements: list = []
        self.connections: list = []

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakeConnection(self)
        self.connections.append(conn)
        return conn


@pytest.fixture
def fake_db():
    return FakeConnectionFactory()


class StubProber:
    def __init__(self, decision: BackendDecision):
        self.decision = decision
        self.calls = 0

    def probe(self) -> BackendDecision:
        self.calls += 1
        return self.decision


class _FakeRemoteRepo:
    def __init__(self, items=()):
        self.items = list(items)
        self.calls: list = []
        self.fail_on: set = set()
        self.list_hook: Optional[Callable] = None

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            if name == "list_all":
                raise ConnectionFailure(f"{name} failed")
            raise MutationFailure(f"{name} rejected")

    def list_all(self):
        if self.list_hook is not None:
            self.list_hook()
        self._call("list_all")
        return list(self.items)

    def _replace(self, item_id, updated):
        self.items = [updated if i.id == item_id else i for i in self.items]
        return updated

    def _get(self, item_id):
        return next(i for i in self.items if i.id == item_id)


class FakeMemberRepo(_FakeRemoteRepo):
    def insert(self, *, name, email, department, avatar=None):
        self._call("insert", name)
        member = TeamMember(id=new_row_id(), name=name, email=email, department=department, avatar=avatar)
        self.items.append(member)
        return member

    def update(self, member_id, *, name, email, department, avatar=None):
        self._call("update", member_id, name)
        current = self._get(member_id)
        return self._replace(member_id, replace(current, name=name, email=email, department=department, avatar=avatar))

    def delete(self, member_id):
        self._call("delete", member_id)
        self.items = [i for i in self.items if i.id != member_id]

    def rename_department(self, *, old_name, new_name):
        self._call("rename_department", old_name, new_name)
        moved = [i for i in self.items if i.department == old_name]
        self.items = [replace(i, department=new_name) if i.department == old_name else i for i in self.items]
        return len(moved)


class FakeDepartmentRepo(_FakeRemoteRepo):
    def insert(self, *, name, description, created_date):
        self._call("insert", name)
        dept = Department(id=new_row_id(), name=name, description=description, created_date=created_date)
        self.items.append(dept)
        return dept

    def update(self, department_id, *, name, description):
        self._call("update", department_id, name)
        current = self._get(department_id)
        return self._replace(department_id, replace(current, name=name, description=description))

    def delete(self, department_id):
        self._call("delete", department_id)
        self.items = [i for i in self.items if i.id != department_id]


class FakeLeaveRepo(_FakeRemoteRepo):
    def insert(self, *, employee_name, employee_id, start_date, end_date, leave_type, reason, submitted_date):
        self._call("insert", employee_id)
        leave = LeaveRequest(
            id=new_row_id(),
            employee_name=employee_name,
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            reason=reason,
            submitted_date=submitted_date,
        )
        self.items.insert(0, leave)
        return leave

    def update(self, leave_id, *, start_date, end_date, leave_type, reason):
        self._call("update", leave_id)
        current = self._get(leave_id)
        return self._replace(
            leave_id, replace(current, start_date=start_date, end_date=end_date, leave_type=leave_type, reason=reason)
        )

    def delete(self, leave_id):
        self._call("delete", leave_id)
        self.items = [i for i in self.items if i.id != leave_id]

    def rename_employee(self, *, employee_id, employee_name):
        self._call("rename_employee", employee_id, employee_name)
        self.items = [replace(i, employee_name=employee_name) if i.employee_id == employee_id else i for i in self.items]
        return 1


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def make_local_mediator(store):
    def _make(decision: BackendDecision = BackendDecision.unconfigured(), *, initialize: bool = True) -> SyncMediator:
        counter = iter(range(1000, 100000))
        mediator = SyncMediator(
            prober=StubProber(decision),
            local=LocalStorageAdapter(store),
            clock=lambda: FIXED_TODAY,
            id_factory=lambda: f"local-{next(counter)}",
        )
        if initialize:
            mediator.initialize()
            mediator.drain_notifications()
        return mediator

    return _make
