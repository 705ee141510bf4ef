"""Domain exceptions for tasktrail.

Defines domain-level exceptions that represent business rule violations and
the store-level failure kinds surfaced to callers. Every mutating operation
runs in its own unit of work; any of these raised inside the unit rolls it
back entirely before reaching the caller.
"""

from typing import Any


class TaskTrailException(Exception):
    """Base exception for all tasktrail errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, task_id).
        retryable: True when the caller may retry the same input unchanged.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(TaskTrailException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidFieldValueException(ValidationException):
    """Raised when a value is outside an enumerated domain (role, priority, status)."""

    def __init__(self, field: str, value: Any, allowed: list[str]) -> None:
        """Initialize with the offending field, value and the allowed values.

        Args:
            field: Field name (e.g. 'priority').
            value: Rejected value.
            allowed: Valid values for the field.
        """
        super().__init__(
            f"Invalid {field} {value!r}; expected one of: {', '.join(allowed)}",
            field=field,
        )
        self.error_code = "INVALID_FIELD_VALUE"
        self.details["value"] = value
        self.details["allowed"] = allowed


class TenantMismatchException(ValidationException):
    """Raised when a user referenced by an operation belongs to another tenant."""

    def __init__(self, user_id: str, tenant_id: str) -> None:
        """Initialize with the user and the tenant the operation is scoped to.

        Args:
            user_id: User that is outside the tenant.
            tenant_id: Tenant of the task or operation.
        """
        super().__init__(f"User {user_id} does not belong to tenant {tenant_id}")
        self.error_code = "TENANT_MISMATCH"
        self.details.update({"user_id": user_id, "tenant_id": tenant_id})


class ResourceNotFoundException(TaskTrailException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'user', 'tenant').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TaskNotFoundException(ResourceNotFoundException):
    """Raised when an operation references a task that is not active."""

    def __init__(self, task_id: str) -> None:
        super().__init__("task", task_id)
        self.error_code = "TASK_NOT_FOUND"


class DuplicateTaskException(TaskTrailException):
    """Raised when an active task with the same (tenant, owner, title, description) exists."""

    def __init__(self, tenant_id: str, owner_id: str, title: str) -> None:
        """Initialize with the identifying parts of the duplicate tuple.

        Args:
            tenant_id: Tenant of the task.
            owner_id: Owner of the task.
            title: Task title.
        """
        super().__init__(
            "A task with similar attributes already exists.",
            "DUPLICATE_TASK",
            {"tenant_id": tenant_id, "owner_id": owner_id, "title": title},
        )


class UserAlreadyExistsException(TaskTrailException):
    """Raised when creating a user whose username already exists in the tenant."""

    def __init__(self, tenant_id: str, username: str) -> None:
        super().__init__(
            "Username already registered in this tenant",
            "USER_ALREADY_EXISTS",
            {"tenant_id": tenant_id, "username": username},
        )


class ConcurrentModificationConflict(TaskTrailException):
    """Raised when a concurrent transaction won a write on the same rows; retry."""

    retryable = True

    def __init__(self, resource_type: str, resource_id: str | None = None) -> None:
        """Initialize with the contended resource.

        Args:
            resource_type: Type of resource (e.g. 'task').
            resource_id: Optional id; None when the store did not say which row.
        """
        details: dict[str, Any] = {"resource_type": resource_type}
        if resource_id is not None:
            details["resource_id"] = resource_id
        super().__init__(
            f"{resource_type} was modified by another transaction; retry.",
            "CONCURRENT_MODIFICATION",
            details,
        )


class ArchivalTransactionFailure(TaskTrailException):
    """Raised when any step of the archival unit failed; nothing was archived."""

    retryable = True

    def __init__(self, reason: str, cutoff: str | None = None) -> None:
        """Initialize with the failure reason.

        Args:
            reason: Human-readable reason (e.g. underlying error message).
            cutoff: ISO timestamp of the cutoff the run used.
        """
        details: dict[str, Any] = {"reason": reason}
        if cutoff is not None:
            details["cutoff"] = cutoff
        super().__init__(
            f"Archival failed and was rolled back: {reason}",
            "ARCHIVAL_FAILED",
            details,
        )


class TransactionTimeoutException(TaskTrailException):
    """Raised when a unit of work exceeded transaction_timeout_seconds and was rolled back."""

    retryable = True

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            f"Transaction timed out after {timeout_seconds} seconds",
            "TRANSACTION_TIMEOUT",
            {"timeout_seconds": timeout_seconds},
        )


class StoreUnavailableException(TaskTrailException):
    """Raised when the entity store cannot be reached or failed outside the domain rules."""

    retryable = True

    def __init__(self, reason: str = "Entity store unavailable") -> None:
        super().__init__(reason, "SERVICE_UNAVAILABLE")
