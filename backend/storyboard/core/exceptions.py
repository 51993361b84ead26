"""Exceptions raised by the API and its AI integrations

APIException subclasses map directly onto an HTTP status and error code.
ServiceException subclasses describe failures of the hosted AI providers;
their detail is logged but never sent to the client.
"""
from typing import Optional, Dict, Any


class APIException(Exception):
    """Base exception for all API-level errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "API_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}


class ValidationException(APIException):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"field": field} if field else {}
        )
        self.field = field


class AuthenticationException(APIException):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message=message, error_code="UNAUTHORIZED", status_code=401)


class InvalidCredentialsException(APIException):
    """Login failure. Unknown email and wrong password look the same."""

    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            error_code="INVALID_CREDENTIALS",
            status_code=400
        )


class NotFoundException(APIException):
    """Missing resource, or a resource owned by somebody else."""

    def __init__(self, resource: str):
        super().__init__(
            message=f"{resource} not found",
            error_code="NOT_FOUND",
            status_code=404
        )
        self.resource = resource


class ConflictException(APIException):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="CONFLICT", status_code=409)


class ServiceException(Exception):
    """Raised when an external AI service fails"""

    def __init__(
        self,
        message: str,
        service_name: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.service_name = service_name
        self.status_code = status_code
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "service": self.service_name,
            "status_code": self.status_code,
            "original_error": str(self.original_error) if self.original_error else None
        }


class ScriptGenerationError(ServiceException):
    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, service_name="script", original_error=original_error)


class ImageGenerationError(ServiceException):
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(
            message,
            service_name="image",
            status_code=status_code,
            original_error=original_error
        )


class ImageQuotaError(ImageGenerationError):
    """Provider quota exhausted or payment required (HTTP 402)"""


class ImageAuthError(ImageGenerationError):
    """Provider rejected the API key (HTTP 401/403)"""


class ImageRateLimitError(ImageGenerationError):
    """Provider rate limit hit (HTTP 429)"""


class ImageHTTPError(ImageGenerationError):
    """Any other non-success response from the provider"""


class ImageNetworkError(ImageGenerationError):
    """Provider unreachable or the request timed out"""
