"""Domain layer: enums and exceptions.

No dependencies on infrastructure. Used by application and infrastructure
layers.
"""

from tasktrail.domain.enums import Priority, Role, TaskStatus
from tasktrail.domain.exceptions import (
    ArchivalTransactionFailure,
    ConcurrentModificationConflict,
    DuplicateTaskException,
    InvalidFieldValueException,
    ResourceNotFoundException,
    StoreUnavailableException,
    TaskNotFoundException,
    TaskTrailException,
    TenantMismatchException,
    TransactionTimeoutException,
    UserAlreadyExistsException,
    ValidationException,
)

__all__ = [
    # Enums
    "Priority",
    "Role",
    "TaskStatus",
    # Exceptions
    "ArchivalTransactionFailure",
    "ConcurrentModificationConflict",
    "DuplicateTaskException",
    "InvalidFieldValueException",
    "ResourceNotFoundException",
    "StoreUnavailableException",
    "TaskNotFoundException",
    "TaskTrailException",
    "TenantMismatchException",
    "TransactionTimeoutException",
    "UserAlreadyExistsException",
    "ValidationException",
]
