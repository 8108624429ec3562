from __future__ import annotations

from enum import Enum


class LeaveType(str, Enum):
    """Closed set of leave categories."""

    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class StorageMode(str, Enum):
    """Which backend the current session persists to."""

    CHECKING = "checking"
    LOCAL = "localStorage"
    REMOTE = "remote"


class BackendStatus(str, Enum):
    """Outcome of probing the remote backend at startup."""

    UNCONFIGURED = "UNCONFIGURED"
    READY = "READY"
    NOT_PROVISIONED = "NOT_PROVISIONED"
    ERROR = "ERROR"


class ProbeOutcome(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    INCONCLUSIVE = "INCONCLUSIVE"


class Collection(str, Enum):
    """Logical collections and their local storage keys."""

    TEAM_MEMBERS = "team-leave-app-members"
    LEAVE_REQUESTS = "team-leave-app-leaves"
    DEPARTMENTS = "team-leave-app-departments"


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    SCHEMA_NOT_PROVISIONED = "SCHEMA_NOT_PROVISIONED"
    CONNECTION_FAILURE = "CONNECTION_FAILURE"
    PARTIAL_LOAD_FAILURE = "PARTIAL_LOAD_FAILURE"
    MUTATION_FAILURE = "MUTATION_FAILURE"
