"""Exception hierarchy raised by the service layer."""


class ServiceError(Exception):
    """Base exception for all service errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ValidationError(ServiceError):
    """Raised when request fields are missing or out of range."""
    pass


class ConflictError(ServiceError):
    """Raised when a write would duplicate an existing user or review."""
    pass


class AuthError(ServiceError):
    """Raised when credentials don't match. Never says which part was wrong."""
    pass


class StorageError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.details = details
        super().__init__(message)
