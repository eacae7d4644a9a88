"""
Shared error handling for the Procurement Listener.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class ProcurementException(Exception):
    """Base exception for Procurement Listener services."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(ProcurementException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ParameterValidationError(ValidationError):
    """Entitlement parameters do not satisfy the plan's schema.

    ``violations`` carries the individual schema failures; they are meant for
    logs and never leave the service.
    """

    def __init__(self, message: str = "Parameters are not valid", violations: Optional[list] = None):
        self.violations = list(violations or [])
        super().__init__(message, {"violations": self.violations})


class MetadataLoadError(ProcurementException):
    """Service/plan metadata could not be read or parsed."""

    status_code = 500

    def __init__(self, message: str = "Unable to load metadata", details: Optional[Dict[str, Any]] = None):
        super().__init__("METADATA_ERROR", message, details)


class UnsupportedEventTypeError(ProcurementException):
    """A well-formed event whose type has no handling path."""

    status_code = 500

    def __init__(self, event_type: str, details: Optional[Dict[str, Any]] = None):
        self.event_type = event_type
        super().__init__(
            "UNSUPPORTED_EVENT_TYPE",
            f"Unsupported entitlement event type: '{event_type}'",
            details
        )
