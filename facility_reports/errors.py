"""
Facility Reports error hierarchy.

Every error raised by the engine derives from ReportsError and carries the
HTTP status and machine-readable code the API layer renders.
"""

from typing import Iterable, List, Optional


class ReportsError(Exception):
    """Base exception for engine errors."""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ReportsError):
    """A required field is missing or carries an unknown value."""

    status_code = 422
    error_code = "VALIDATION_ERROR"

    def __init__(self, fields: Iterable[str], message: Optional[str] = None):
        self.fields: List[str] = list(fields)
        super().__init__(
            message or f"Missing or invalid fields: {', '.join(self.fields)}"
        )


class AuthorizationError(ReportsError):
    """
    Operation denied by the capability matrix.

    The message is always generic: it never names the capability that
    would have allowed the call.
    """

    status_code = 403
    error_code = "PERMISSION_DENIED"

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class AlreadyAssignedError(ReportsError):
    """Report is already assigned to the requested technician."""

    status_code = 409
    error_code = "ALREADY_ASSIGNED"

    def __init__(self, report_id: str, technician_id: str):
        self.report_id = report_id
        self.technician_id = technician_id
        super().__init__(
            f"Report {report_id} is already assigned to {technician_id}"
        )


class NotFoundError(ReportsError):
    """Referenced report or user does not exist."""

    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class StoreError(ReportsError):
    """Underlying persistence failure. Never retried by the engine."""

    status_code = 503
    error_code = "STORE_UNAVAILABLE"

    def __init__(self, message: str = "Store temporarily unavailable"):
        super().__init__(message)
