class DomainError(Exception):
    """Base exception for business rule violations."""


class NotFoundError(DomainError):
    """Raised when a referenced employee or attendance record does not exist."""


class InvalidStateError(DomainError):
    """Raised when an operation violates the attendance state machine."""


class ValidationError(DomainError):
    """Raised when input data is invalid."""


class StoreFailureError(DomainError):
    """Raised when the underlying store fails (I/O, timeout, lost connection)."""


class DuplicateRecordError(StoreFailureError):
    """Raised by the store when an insert or update hits a unique key."""
