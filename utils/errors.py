"""
utils/errors.py
---------------
Application error types.
Services raise these; the presentation layer maps them to HTTP responses.
"""


class FinanceError(Exception):
    """Base class for all application errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FinanceError):
    """User input rejected at the boundary (never silently coerced)."""

    status_code = 400


class AuthenticationError(FinanceError):
    """Bad credentials or a missing/invalid session token."""

    status_code = 401


class NotFoundError(FinanceError):
    """Owner-scoped lookup returned nothing."""

    status_code = 404


class ConflictError(FinanceError):
    """A uniqueness rule was violated."""

    status_code = 409

    def __init__(self, message: str, status_code: int = 409):
        super().__init__(message)
        self.status_code = status_code


class StoreUnavailableError(FinanceError):
    """The database cannot be reached or the pool is not initialized."""

    status_code = 500
