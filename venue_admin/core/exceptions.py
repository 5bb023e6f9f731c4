"""
Custom application exceptions
"""

from typing import Optional, List, Any


class VenueAdminException(Exception):
    """Base exception for the venue admin application"""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[List[str]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or []
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class AuthenticationError(VenueAdminException):
    """Authentication related errors"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            code="AUTH_ERROR",
            status_code=401
        )


class AuthorizationError(VenueAdminException):
    """Authorization related errors"""

    def __init__(self, message: str = "Unauthorized access"):
        super().__init__(
            message=message,
            code="AUTH_FORBIDDEN",
            status_code=403
        )


class NotFoundError(VenueAdminException):
    """Resource not found errors"""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details=[f"No {resource.lower()} with id {identifier}"] if identifier else None
        )


class ValidationError(VenueAdminException):
    """Validation errors"""

    def __init__(self, message: str = "Validation error", details: Optional[List[str]] = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=details
        )


class PayloadTooLargeError(VenueAdminException):
    """Upload exceeds the configured size limit"""

    def __init__(self, limit: int):
        super().__init__(
            message=f"File exceeds the maximum upload size of {limit} bytes",
            code="PAYLOAD_TOO_LARGE",
            status_code=413
        )


class UpstreamServiceError(VenueAdminException):
    """Identity, storage or payment provider failure"""

    def __init__(self, service: str, message: str = None):
        super().__init__(
            message=message or f"External service {service} is unavailable",
            code="UPSTREAM_SERVICE_ERROR",
            status_code=502
        )
        self.service = service


class PersistenceError(VenueAdminException):
    """Database failure"""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            message=message,
            code="PERSISTENCE_ERROR",
            status_code=500
        )
