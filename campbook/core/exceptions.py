from typing import Optional, Any

class CampBookError(Exception):
    """
    Base exception for CampBook application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(CampBookError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class AuthenticationError(CampBookError):
    """
    Raised when the caller cannot be authenticated.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="UNAUTHENTICATED", status_code=401, details=details)

class ForbiddenError(CampBookError):
    """
    Raised when an authenticated caller fails a role or ownership check.
    """
    def __init__(self, message: str = "Not authorized to access this resource", details: Optional[Any] = None):
        super().__init__(message, code="FORBIDDEN", status_code=403, details=details)

class ValidationError(CampBookError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_ARGUMENT", status_code=400, details=details)

class ConflictError(CampBookError):
    """
    Raised when a unique field is already taken.
    """
    def __init__(self, message: str = "Resource already exists", details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=400, details=details)

class QuotaExceededError(CampBookError):
    """
    Raised when a user already holds the maximum number of bookings.
    """
    def __init__(self, message: str = "Booking limit reached", details: Optional[Any] = None):
        super().__init__(message, code="QUOTA_EXCEEDED", status_code=400, details=details)

class ExternalServiceError(CampBookError):
    """
    Raised when the identity provider fails unexpectedly.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=500, details=details)
