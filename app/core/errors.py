"""
Domain error hierarchy.

Every error carries an HTTP status and a machine-readable code; the global
handlers in app/api/error_handlers.py render them as the standard error
envelope.
"""

from typing import Any, Optional


class EventosError(Exception):
    """Base exception for all domain failures"""

    status_code: int = 400
    error_code: str = "ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class AuthenticationError(EventosError):
    """Missing, malformed or expired credentials"""
    status_code = 401
    error_code = "AUTHENTICATION_FAILED"


class DomainValidationError(EventosError):
    """Input failed a field-level rule"""
    status_code = 400
    error_code = "VALIDATION_ERROR"


class NotFoundError(EventosError):
    """Resource does not exist, or belongs to another user"""
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", message: Optional[str] = None):
        super().__init__(message or f"{resource} not found")
        self.resource = resource


class ConflictError(EventosError):
    """Operation clashes with current state (capacity, duplicates, references)"""
    status_code = 400
    error_code = "CONFLICT"


class StorageError(EventosError):
    """Backend failed in a way the caller cannot fix"""
    status_code = 500
    error_code = "STORAGE_ERROR"
