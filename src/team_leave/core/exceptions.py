from __future__ import annotations

from typing import Optional

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = ErrorKind.VALIDATION


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an id does not match any record of the session."""

    kind = ErrorKind.NOT_FOUND


class ConstraintViolation(DomainError):
    """Duplicate email/department name, or deleting a department still in use."""

    kind = ErrorKind.CONSTRAINT_VIOLATION

    def __init__(self, message: str, *, member_count: Optional[int] = None):
        super().__init__(message)
        self.member_count = member_count


class BackendError(Exception):
    """Base exception for failures talking to a persistence backend."""

    kind = ErrorKind.CONNECTION_FAILURE


class SchemaNotProvisioned(BackendError):
    kind = ErrorKind.SCHEMA_NOT_PROVISIONED


class ConnectionFailure(BackendError):
    kind = ErrorKind.CONNECTION_FAILURE


class PartialLoadFailure(BackendError):
    """One of the three read-all queries failed during the initial load."""

    kind = ErrorKind.PARTIAL_LOAD_FAILURE

    def __init__(self, collection: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to load {collection}")
        self.collection = collection
        self.cause = cause


class MutationFailure(BackendError):
    """A single remote write was rejected."""

    kind = ErrorKind.MUTATION_FAILURE
