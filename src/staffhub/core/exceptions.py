class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when a credential re-check (password, salary PIN) fails."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced staff, user, shift or branch does not exist."""


class ConflictError(DomainError):
    """Raised when an operation would duplicate or overwrite existing state."""
