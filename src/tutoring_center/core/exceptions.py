class DomainError(Exception):
    """Base exception for business rule violations."""


class NotFoundError(DomainError):
    """Raised when a referenced course, session, student or teacher does not exist."""


class ConflictError(DomainError):
    """Raised when acting on a soft-deleted course or on a duplicate natural key."""


class InvalidInputError(DomainError):
    """Raised when input data is malformed or a required set is empty."""


class InvalidStateError(DomainError):
    """Raised when an entity is not in a state that allows the action."""


class UnauthorizedError(DomainError):
    """Raised when the caller-supplied authorization check failed."""
