"""
Error Taxonomy Module

Every failure the assignment service reports is a ServiceError carrying
one ErrorKind from a closed set, the operation that failed, and the
identifiers involved. The HTTP layer maps errors by category, never by
message text.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Broad error families, each mapped to one HTTP status."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"


class ErrorKind(str, Enum):
    """Closed set of error kinds reported by the service."""
    # Validation
    EMPTY_TEAM_NAME = "EMPTY_TEAM_NAME"
    EMPTY_TEAM_MEMBERS = "EMPTY_TEAM_MEMBERS"
    EMPTY_MEMBER_ID = "EMPTY_MEMBER_ID"
    EMPTY_MEMBER_NAME = "EMPTY_MEMBER_NAME"
    EMPTY_USER_ID = "EMPTY_USER_ID"
    EMPTY_PR_ID = "EMPTY_PR_ID"
    EMPTY_PR_NAME = "EMPTY_PR_NAME"
    EMPTY_AUTHOR_ID = "EMPTY_AUTHOR_ID"

    # Not found
    TEAM_NOT_FOUND = "TEAM_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    PR_NOT_FOUND = "PR_NOT_FOUND"

    # Conflict
    TEAM_EXISTS = "TEAM_EXISTS"
    USER_EXISTS = "USER_EXISTS"
    PR_EXISTS = "PR_EXISTS"
    PR_MERGED = "PR_MERGED"
    NOT_ASSIGNED = "NOT_ASSIGNED"
    NO_CANDIDATE = "NO_CANDIDATE"

    # Storage
    STORAGE_FAILURE = "STORAGE_FAILURE"


class ServiceError(Exception):
    """
    Base class for all assignment service errors.

    Attributes:
        kind: Which error occurred
        operation: Service operation that raised it (e.g. "create_pr")
        context: Identifiers involved, safe to log
    """
    category: ErrorCategory = ErrorCategory.STORAGE

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        operation: Optional[str] = None,
        **context: Any
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.operation = operation
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, str]:
        """Get the error body returned to HTTP clients."""
        return {"code": self.kind.value, "message": self.message}


class InputValidationError(ServiceError):
    """Empty or malformed input. Raised before storage is touched."""
    category = ErrorCategory.VALIDATION


class NotFoundError(ServiceError):
    """A team, user or pull request does not exist."""
    category = ErrorCategory.NOT_FOUND


class ConflictError(ServiceError):
    """The request conflicts with current state."""
    category = ErrorCategory.CONFLICT


class StorageError(ServiceError):
    """The store failed; the original exception is chained as __cause__."""
    category = ErrorCategory.STORAGE

    def __init__(self, message: str, operation: Optional[str] = None, **context: Any):
        super().__init__(ErrorKind.STORAGE_FAILURE, message, operation, **context)
