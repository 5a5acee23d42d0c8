class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when an operation would duplicate an existing record (attendance, vote)."""

    status_code = 409


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401
