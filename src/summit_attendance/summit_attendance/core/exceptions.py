class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a lookup (e.g. by mobile number) matches no record."""


class PreconditionFailed(DomainError):
    """Raised when an attendance recording is attempted outside its window
    or for a day that is already complete. Callers should re-fetch eligibility."""


class TransientStoreError(DomainError):
    """Raised when the backing store cannot be reached or fails mid-operation."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
