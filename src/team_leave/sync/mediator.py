"""Session-level owner of the three collections.

At startup the mediator asks the prober which backend to use, loads the data
from it and then routes every mutation to that backend. In local mode every
change is written back through the LocalStorageAdapter; in remote mode the
in-memory state is only touched after the remote write has succeeded.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..common.datetime_utils import coerce_date, today_local
from ..common.identifiers import new_id
from ..common.validators import (
    optional_text,
    require_date_range,
    require_email,
    require_leave_type,
    require_non_empty,
)
from ..core.constants import DEMO_MODE_MESSAGE, NOT_PROVISIONED_MESSAGE
from ..core.enums import BackendStatus, Collection, ErrorKind, StorageMode
from ..core.exceptions import (
    BackendError,
    ConstraintViolation,
    DomainError,
    NotFoundError,
    PartialLoadFailure,
    SchemaNotProvisioned,
    ValidationError,
)
from ..core.logging import get_logger
from ..database.prober import BackendProber
from ..departments.model import Department
from ..departments.repository import DepartmentRepository
from ..leaves.model import LeaveRequest
from ..leaves.queries import members_in_department
from ..leaves.repository import LeaveRequestRepository
from ..members.model import TeamMember
from ..members.repository import TeamMemberRepository
from ..storage.local_store import LocalStorageAdapter
from .notifications import Notification, NotificationLog

logger = get_logger(__name__)


class SyncMediator:
    def __init__(
        self,
        *,
        prober: BackendProber,
        local: LocalStorageAdapter,
        members_repo: Optional[TeamMemberRepository] = None,
        departments_repo: Optional[DepartmentRepository] = None,
        leaves_repo: Optional[LeaveRequestRepository] = None,
        clock: Callable[[], date] = today_local,
        id_factory: Callable[[], str] = new_id,
    ):
        self._prober = prober
        self._local = local
        self._members_repo = members_repo
        self._departments_repo = departments_repo
        self._leaves_repo = leaves_repo
        self._clock = clock
        self._new_id = id_factory

        self._lock = threading.RLock()
        self._notifications = NotificationLog()

        self._mode = StorageMode.CHECKING
        self._loaded = False
        self._error: Optional[str] = None
        self._members: List[TeamMember] = []
        self._departments: List[Department] = []
        self._leaves: List[LeaveRequest] = []

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------
    @property
    def mode(self) -> StorageMode:
        return self._mode

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def error(self) -> Optional[str]:
        """Diagnostic shown when the session fell back to local storage."""
        return self._error

    @property
    def demo_mode(self) -> bool:
        return self._mode == StorageMode.LOCAL and self._error is None

    @property
    def banner(self) -> Optional[str]:
        if self._mode != StorageMode.LOCAL:
            return None
        return self._error or DEMO_MODE_MESSAGE

    @property
    def team_members(self) -> Tuple[TeamMember, ...]:
        return tuple(self._members)

    @property
    def departments(self) -> Tuple[Department, ...]:
        return tuple(self._departments)

    @property
    def leave_requests(self) -> Tuple[LeaveRequest, ...]:
        return tuple(self._leaves)

    def drain_notifications(self) -> List[Notification]:
        return self._notifications.drain()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "storageMode": self._mode.value,
            "isLoaded": self._loaded,
            "error": self._error,
            "demoMode": self.demo_mode,
            "banner": self.banner,
            "teamMembers": [m.to_dict() for m in self._members],
            "departments": [d.to_dict() for d in self._departments],
            "leaveRequests": [leave.to_dict() for leave in self._leaves],
        }

    def member_count(self, department_name: str) -> int:
        return len(members_in_department(department_name, self._members))

    @property
    def _remote_available(self) -> bool:
        return None not in (self._members_repo, self._departments_repo, self._leaves_repo)

    # ------------------------------------------------------------------
    # Startup / reload
    # ------------------------------------------------------------------
    def initialize(self) -> StorageMode:
        """Pick the backend for a fresh session and load all three collections."""
        with self._lock:
            self._mode = StorageMode.CHECKING
            self._loaded = False
            self._error = None

            decision = self._prober.probe()
            logger.info("backend probe -> %s %s", decision.status.value, decision.message or "")

            if decision.status == BackendStatus.READY and self._remote_available:
                try:
                    self._load_remote()
                except PartialLoadFailure as e:
                    logger.error("remote load failed, falling back to local storage: %s", e)
                    if isinstance(e.cause, SchemaNotProvisioned):
                        self._enter_local(NOT_PROVISIONED_MESSAGE)
                    else:
                        self._enter_local(f"Database error: {e}. Using local storage mode.")
            elif decision.status == BackendStatus.NOT_PROVISIONED:
                self._enter_local(NOT_PROVISIONED_MESSAGE)
            elif decision.status == BackendStatus.ERROR:
                self._enter_local(
                    f"Database connection failed: {decision.message or 'unknown error'}. Using local storage mode."
                )
            else:
                self._enter_local(None)

            logger.info(
                "session ready: mode=%s members=%d departments=%d leaves=%d",
                self._mode.value,
                len(self._members),
                len(self._departments),
                len(self._leaves),
            )
            return self._mode

    def _load_remote(self) -> None:
        loaders = (
            ("departments", self._departments_repo.list_all),
            ("team members", self._members_repo.list_all),
            ("leave requests", self._leaves_repo.list_all),
        )
        with ThreadPoolExecutor(max_workers=len(loaders), thread_name_prefix="remote-load") as executor:
            futures = [(label, executor.submit(loader)) for label, loader in loaders]
            wait([f for _, f in futures])

        results = []
        for label, future in futures:
            exc = future.exception()
            if exc is not None:
                raise PartialLoadFailure(label, exc)
            results.append(list(future.result()))

        # All three succeeded: only now does the session see remote data.
        self._departments, self._members, self._leaves = results
        self._mode = StorageMode.REMOTE
        self._loaded = True

    def _enter_local(self, error: Optional[str]) -> None:
        self._mode = StorageMode.LOCAL
        self._error = error
        try:
            self._local.initialize_defaults()
            self._members = self._local.load_members()
            self._leaves = self._local.load_leave_requests()
            self._departments = self._local.load_departments()
        except Exception:
            logger.exception("error loading local storage data")
            self._members, self._leaves, self._departments = [], [], []
        self._loaded = True

    def _persist(self, *collections: Collection) -> None:
        if self._mode != StorageMode.LOCAL or not self._loaded:
            return
        snapshots = {
            Collection.TEAM_MEMBERS: self._members,
            Collection.LEAVE_REQUESTS: self._leaves,
            Collection.DEPARTMENTS: self._departments,
        }
        for collection in collections:
            try:
                self._local.save(collection, snapshots[collection])
            except Exception:
                logger.exception("error saving %s", collection.value)

    @property
    def _remote(self) -> bool:
        return self._mode == StorageMode.REMOTE

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_loaded(self) -> None:
        if not self._loaded:
            raise ValidationError("Team data is still loading")

    def _fail(self, action: str, error: Exception, *, title: str = "Error") -> None:
        if isinstance(error, BackendError):
            logger.error("%s failed: %s", action, error)
            self._notifications.error(f"Failed to {action}.", kind=error.kind, title=title)
        else:
            logger.info("%s rejected: %s", action, error)
            self._notifications.error(str(error), kind=getattr(error, "kind", ErrorKind.VALIDATION), title=title)
        return None

    def _compensate(self, description: str, undo: Callable[[], Any]) -> None:
        try:
            undo()
        except BackendError as e:
            logger.error("could not roll back %s, remote data is inconsistent: %s", description, e)
        else:
            logger.warning("rolled back %s after a failed follow-up write", description)

    def _find_member(self, member_id: str) -> Tuple[int, TeamMember]:
        for i, member in enumerate(self._members):
            if member.id == member_id:
                return i, member
        raise NotFoundError(f"Team member {member_id} does not exist")

    def _find_department(self, department_id: str) -> Tuple[int, Department]:
        for i, dept in enumerate(self._departments):
            if dept.id == department_id:
                return i, dept
        raise NotFoundError(f"Department {department_id} does not exist")

    def _find_leave(self, leave_id: str) -> Tuple[int, LeaveRequest]:
        for i, leave in enumerate(self._leaves):
            if leave.id == leave_id:
                return i, leave
        raise NotFoundError(f"Leave request {leave_id} does not exist")

    def _validate_member(
        self,
        *,
        name: str,
        email: str,
        department: str,
        avatar: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> Tuple[str, str, str, Optional[str]]:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        department = require_non_empty(department, "Department")

        if any(m.email.lower() == email.lower() and m.id != exclude_id for m in self._members):
            raise ConstraintViolation("A team member with this email already exists")
        if not any(d.name == department for d in self._departments):
            raise ValidationError(f"Department {department!r} does not exist")
        return name, email, department, optional_text(avatar)

    def _validate_department_name(self, name: str, *, exclude_id: Optional[str] = None) -> str:
        name = require_non_empty(name, "Department name")
        if any(d.name.lower() == name.lower() and d.id != exclude_id for d in self._departments):
            raise ConstraintViolation("A department with this name already exists")
        return name

    # ------------------------------------------------------------------
    # Team members
    # ------------------------------------------------------------------
    def add_member(
        self, *, name: str, email: str, department: str, avatar: Optional[str] = None
    ) -> Optional[TeamMember]:
        with self._lock:
            try:
                self._require_loaded()
                name, email, department, avatar = self._validate_member(
                    name=name, email=email, department=department, avatar=avatar
                )
                if self._remote:
                    member = self._members_repo.insert(name=name, email=email, department=department, avatar=avatar)
                else:
                    member = TeamMember(id=self._new_id(), name=name, email=email, department=department, avatar=avatar)
            except (DomainError, BackendError) as e:
                return self._fail("add team member", e)

            self._members.append(member)
            self._persist(Collection.TEAM_MEMBERS)
            self._notifications.success("Team member added successfully!")
            return member

    def edit_member(
        self,
        member_id: str,
        *,
        name: str,
        email: str,
        department: str,
        avatar: Optional[str] = None,
    ) -> Optional[TeamMember]:
        """Update a member; a rename is copied onto all of their leave requests."""
        with self._lock:
            try:
                self._require_loaded()
                index, existing = self._find_member(member_id)
                name, email, department, avatar = self._validate_member(
                    name=name, email=email, department=department, avatar=avatar, exclude_id=member_id
                )
                if self._remote:
                    updated = self._members_repo.update(
                        member_id, name=name, email=email, department=department, avatar=avatar
                    )
                    try:
                        self._leaves_repo.rename_employee(employee_id=member_id, employee_name=updated.name)
                    except BackendError:
                        self._compensate(
                            f"team member {member_id}",
                            lambda: self._members_repo.update(
                                member_id,
                                name=existing.name,
                                email=existing.email,
                                department=existing.department,
                                avatar=existing.avatar,
                            ),
                        )
                        raise
                else:
                    updated = replace(existing, name=name, email=email, department=department, avatar=avatar)
            except (DomainError, BackendError) as e:
                return self._fail("update team member", e)

            self._members[index] = updated
            self._leaves = [
                replace(leave, employee_name=updated.name) if leave.employee_id == member_id else leave
                for leave in self._leaves
            ]
            self._persist(Collection.TEAM_MEMBERS, Collection.LEAVE_REQUESTS)
            self._notifications.success("Team member updated successfully!")
            return updated

    def delete_member(self, member_id: str) -> bool:
        """Delete a member together with every leave request that references them."""
        with self._lock:
            try:
                self._require_loaded()
                self._find_member(member_id)
                if self._remote:
                    self._members_repo.delete(member_id)
            except (DomainError, BackendError) as e:
                self._fail("delete team member", e)
                return False

            self._members = [m for m in self._members if m.id != member_id]
            self._leaves = [leave for leave in self._leaves if leave.employee_id != member_id]
            self._persist(Collection.TEAM_MEMBERS, Collection.LEAVE_REQUESTS)
            self._notifications.success("Team member deleted successfully!")
            return True

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------
    def add_department(self, name: str, description: Optional[str] = None) -> Optional[Department]:
        with self._lock:
            try:
                self._require_loaded()
                name = self._validate_department_name(name)
                description = optional_text(description)
                if self._remote:
                    department = self._departments_repo.insert(
                        name=name, description=description, created_date=self._clock()
                    )
                else:
                    department = Department(
                        id=self._new_id(), name=name, description=description, created_date=self._clock()
                    )
            except (DomainError, BackendError) as e:
                return self._fail("add department", e)

            self._departments.append(department)
            self._persist(Collection.DEPARTMENTS)
            self._notifications.success("Department added successfully!")
            return department

    def edit_department(
        self, department_id: str, name: str, description: Optional[str] = None
    ) -> Optional[Department]:
        """Rename/describe a department; members of the old name follow the rename."""
        with self._lock:
            try:
                self._require_loaded()
                index, existing = self._find_department(department_id)
                name = self._validate_department_name(name, exclude_id=department_id)
                description = optional_text(description)
                old_name = existing.name
                renamed = name != old_name

                if self._remote:
                    if renamed:
                        self._members_repo.rename_department(old_name=old_name, new_name=name)
                    try:
                        updated = self._departments_repo.update(department_id, name=name, description=description)
                    except BackendError:
                        if renamed:
                            self._compensate(
                                f"members of department {old_name!r}",
                                lambda: self._members_repo.rename_department(old_name=name, new_name=old_name),
                            )
                        raise
                else:
                    updated = replace(existing, name=name, description=description)
            except (DomainError, BackendError) as e:
                return self._fail("update department", e)

            self._departments[index] = updated
            if renamed:
                self._members = [
                    replace(m, department=updated.name) if m.department == old_name else m for m in self._members
                ]
            self._persist(Collection.DEPARTMENTS, Collection.TEAM_MEMBERS)
            self._notifications.success("Department updated successfully!")
            return updated

    def delete_department(self, department_id: str) -> bool:
        """Delete a department; refused while any member still belongs to it."""
        with self._lock:
            try:
                self._require_loaded()
                _, department = self._find_department(department_id)
                count = self.member_count(department.name)
                if count > 0:
                    raise ConstraintViolation(
                        f'Cannot delete department "{department.name}" because {count} team member(s) '
                        "are assigned to it.",
                        member_count=count,
                    )
                if self._remote:
                    self._departments_repo.delete(department_id)
            except ConstraintViolation as e:
                self._fail("delete department", e, title="Cannot Delete")
                return False
            except (DomainError, BackendError) as e:
                self._fail("delete department", e)
                return False

            self._departments = [d for d in self._departments if d.id != department_id]
            self._persist(Collection.DEPARTMENTS)
            self._notifications.success("Department deleted successfully!")
            return True

    # ------------------------------------------------------------------
    # Leave requests
    # ------------------------------------------------------------------
    def submit_leave(
        self,
        *,
        employee_id: str,
        start_date,
        end_date,
        leave_type,
        reason: str,
    ) -> Optional[LeaveRequest]:
        with self._lock:
            try:
                self._require_loaded()
                employee_id = require_non_empty(employee_id, "Team member")
                try:
                    _, member = self._find_member(employee_id)
                except NotFoundError:
                    raise ValidationError("Please select an existing team member")
                start = coerce_date(start_date, "Start date")
                end = coerce_date(end_date, "End date")
                require_date_range(start, end)
                kind = require_leave_type(leave_type)
                reason = require_non_empty(reason, "Reason")

                if self._remote:
                    leave = self._leaves_repo.insert(
                        employee_name=member.name,
                        employee_id=member.id,
                        start_date=start,
                        end_date=end,
                        leave_type=kind,
                        reason=reason,
                        submitted_date=self._clock(),
                    )
                else:
                    leave = LeaveRequest(
                        id=self._new_id(),
                        employee_name=member.name,
                        employee_id=member.id,
                        start_date=start,
                        end_date=end,
                        leave_type=kind,
                        reason=reason,
                        submitted_date=self._clock(),
                    )
            except (DomainError, BackendError) as e:
                return self._fail("submit leave request", e)

            self._leaves.insert(0, leave)
            self._persist(Collection.LEAVE_REQUESTS)
            self._notifications.success("Leave request submitted successfully!")
            return leave

    def edit_leave(self, leave_id: str, *, start_date, end_date, leave_type, reason: str) -> Optional[LeaveRequest]:
        """Change dates, type or reason. Employee and submitted date stay as they are."""
        with self._lock:
            try:
                self._require_loaded()
                index, existing = self._find_leave(leave_id)
                start = coerce_date(start_date, "Start date")
                end = coerce_date(end_date, "End date")
                require_date_range(start, end)
                kind = require_leave_type(leave_type)
                reason = require_non_empty(reason, "Reason")

                if self._remote:
                    updated = self._leaves_repo.update(
                        leave_id, start_date=start, end_date=end, leave_type=kind, reason=reason
                    )
                else:
                    updated = replace(existing, start_date=start, end_date=end, leave_type=kind, reason=reason)
            except (DomainError, BackendError) as e:
                return self._fail("update leave request", e)

            self._leaves[index] = updated
            self._persist(Collection.LEAVE_REQUESTS)
            self._notifications.success("Leave request updated successfully!")
            return updated

    def delete_leave(self, leave_id: str) -> bool:
        with self._lock:
            try:
                self._require_loaded()
                self._find_leave(leave_id)
                if self._remote:
                    self._leaves_repo.delete(leave_id)
            except (DomainError, BackendError) as e:
                self._fail("delete leave request", e)
                return False

            self._leaves = [leave for leave in self._leaves if leave.id != leave_id]
            self._persist(Collection.LEAVE_REQUESTS)
            self._notifications.success("Leave request deleted successfully!")
            return True
