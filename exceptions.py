"""
Custom exceptions for the portal API.

Routers raise these instead of HTTPException; the handler registered in
main.py turns every PortalError into a JSON body ``{"message": ...}`` with
the error's status code.

Usage:
    from exceptions import NotFound

    if not event:
        raise NotFound("Event")
"""

from typing import Optional, Any, Dict, Iterable


class PortalError(Exception):
    """Base exception for all portal errors"""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error", details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


# ============================================
# Validation Errors (400)
# ============================================

class ValidationError(PortalError):
    """Missing or malformed input"""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details={"field": field} if field else None)


class InvalidFileType(ValidationError):
    code = "INVALID_FILE_TYPE"

    def __init__(self, allowed: Iterable[str]):
        super().__init__(f"Images only! Allowed formats: {', '.join(allowed)}", field="image")


class FileTooLarge(ValidationError):
    code = "FILE_TOO_LARGE"

    def __init__(self, max_bytes: int):
        super().__init__(f"File too large. File size must be less than {max_bytes // (1024 * 1024)}MB", field="image")


class InvalidStatusTransition(ValidationError):
    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, resource: str, current: str, requested: str):
        super().__init__(
            f"{resource} status cannot change from '{current}' to '{requested}'",
            field="status",
        )


class DuplicateResource(PortalError):
    """Unique constraint violated (phone, email, slug, ...)"""

    status_code = 400
    code = "DUPLICATE_RESOURCE"


class DuplicateUser(DuplicateResource):
    def __init__(self, message: str = "User with this phone or email already exists"):
        super().__init__(message)


# ============================================
# Authentication & Authorization Errors
# ============================================

class Unauthorized(PortalError):
    """Missing, invalid or expired credentials"""

    status_code = 401
    code = "NOT_AUTHENTICATED"

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class InvalidCredentials(Unauthorized):
    code = "INVALID_CREDENTIALS"

    def __init__(self):
        super().__init__("Invalid mobile number or password")


class Forbidden(PortalError):
    """Authenticated, but wrong role or wrong owner"""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Not authorized to access this resource"):
        super().__init__(message)


class AccountInactive(Forbidden):
    code = "ACCOUNT_INACTIVE"

    def __init__(self):
        super().__init__("Account is inactive. Please contact admin.")


# ============================================
# Resource Errors
# ============================================

class NotFound(PortalError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource_type: str):
        super().__init__(f"{resource_type} not found", details={"resource_type": resource_type})


class UpstreamUnavailable(PortalError):
    """Document store cannot be reached"""

    status_code = 503
    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, message: str = "Database connection is not available"):
        super().__init__(message)
