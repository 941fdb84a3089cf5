"""
Exception taxonomy for the Storefront API.

Domain services raise these; the HTTP layer maps each class to its error
code and status in the response envelope.
"""

from typing import Optional, Dict, Any


class StorefrontError(Exception):
    """Base exception for all Storefront errors."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception with message and optional details.

        Args:
            message: Human readable error message
            details: Additional structured error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(StorefrontError):
    """Raised when input is malformed or out of range."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[Any] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            value: Offending value
            details: Extra details merged into the error
        """
        merged = dict(details or {})
        if field:
            merged["field"] = field
        if value is not None:
            merged["value"] = str(value)

        super().__init__(message, merged)
        self.field = field
        self.value = value


class Unauthorized(StorefrontError):
    """Raised when a credential is missing, invalid, expired or revoked."""

    code = "UNAUTHORIZED"
    status_code = 401


class Forbidden(StorefrontError):
    """Raised when an authenticated caller is not permitted to act."""

    code = "FORBIDDEN"
    status_code = 403


class NotFound(StorefrontError):
    """Raised when an entity does not exist or is hidden from the caller."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, message: str, resource: Optional[str] = None,
                 resource_id: Optional[Any] = None):
        details = {}
        if resource:
            details["resource"] = resource
        if resource_id is not None:
            details["id"] = str(resource_id)

        super().__init__(message, details)
        self.resource = resource
        self.resource_id = resource_id


class Conflict(StorefrontError):
    """Raised on uniqueness violations, stock races and illegal transitions."""

    code = "CONFLICT"
    status_code = 409


class InternalError(StorefrontError):
    """Raised for unexpected failures; message is never sent to clients."""

    code = "INTERNAL_ERROR"
    status_code = 500


class ConfigurationError(StorefrontError):
    """Raised when configuration is invalid or missing."""
    pass
