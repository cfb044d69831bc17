"""
Portal exceptions.

Services raise these; the HTTP layer maps each one to a status code and a
JSON body of the form ``{"error": {"code": ..., "message": ..., "details": ...}}``.
"""

from typing import Any, Dict, Optional


class PortalError(Exception):
    """Base exception for all portal errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class AuthRequired(PortalError):
    """Operation needs a logged-in caller"""

    status_code = 401

    def __init__(self, message: str = "Please log in to continue"):
        super().__init__(message, code="AUTH_REQUIRED")


class PermissionDenied(PortalError):
    """Caller is logged in but lacks the required role"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="PERMISSION_DENIED")


class ValidationError(PortalError):
    """Input outside policy (file type, file size, unknown enum value)"""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class UploadFailure(PortalError):
    """Object storage write failed"""

    status_code = 502

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="UPLOAD_FAILED", details=details)


class NotFound(PortalError):
    """Lookup matched nothing"""

    status_code = 404

    def __init__(self, message: str = "No such request", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="NOT_FOUND", details=details)


class Conflict(PortalError):
    """Resource already exists"""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class UnexpectedError(PortalError):
    """Any other backend or network failure"""

    status_code = 500

    def __init__(self, message: str = "Something went wrong, please try again", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="UNEXPECTED_ERROR", details=details)
