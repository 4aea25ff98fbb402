"""
Domain error taxonomy.

Every failure raised by the services carries a stable machine-checkable
``code`` plus a human readable message. The HTTP layer maps them to status
codes in ``app.main`` and never forwards store error text.
"""
from typing import Optional


class DomainError(Exception):
    code: str = "INTERNAL"
    http_status: int = 500

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class Unauthenticated(DomainError):
    code = "UNAUTHENTICATED"
    http_status = 401


class Forbidden(DomainError):
    code = "FORBIDDEN"
    http_status = 403

    def __init__(self, message: str = "Forbidden", **kwargs) -> None:
        super().__init__(message, **kwargs)


class NotFound(DomainError):
    code = "NOT_FOUND"
    http_status = 404


class InvalidInput(DomainError):
    code = "INVALID_INPUT"
    http_status = 400


class InvalidState(DomainError):
    code = "INVALID_STATE"
    http_status = 409


class ValidationFailed(DomainError):
    code = "VALIDATION_FAILED"
    http_status = 422


class Conflict(DomainError):
    code = "CONFLICT"
    http_status = 409


class Internal(DomainError):
    code = "INTERNAL"
    http_status = 500

    def __init__(self, message: str = "Internal server error", **kwargs) -> None:
        super().__init__(message, **kwargs)
