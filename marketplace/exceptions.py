"""
HTTP-facing error kinds.

Every failure of the authentication gate or an authorization guard is raised
as one of these and rendered by the app's exception handler as::

    {"success": false, "message": "...", "required": ...}
"""

from typing import Any, Optional

from fastapi import HTTPException, status

_BEARER = {"WWW-Authenticate": "Bearer"}


class MarketplaceError(HTTPException):
    kind: str = "error"
    default_status: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        required: Optional[Any] = None,
        headers: Optional[dict] = None,
    ):
        super().__init__(
            status_code=self.default_status,
            detail=message or self.default_message,
            headers=headers,
        )
        self.required = required

    @property
    def message(self) -> str:
        return self.detail


# ── 401 ─────────────────────────────────────────────────────────
class AuthenticationError(MarketplaceError):
    kind = "unauthenticated"
    default_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers=_BEARER)


class MissingCredentialError(AuthenticationError):
    kind = "missing_credential"
    default_message = "Not authorized, no token"


class RevokedCredentialError(AuthenticationError):
    kind = "revoked_credential"
    default_message = "Token has been invalidated"


class InvalidCredentialError(AuthenticationError):
    kind = "invalid_credential"
    default_message = "Not authorized, token failed"


class UnknownSubjectError(AuthenticationError):
    kind = "unknown_subject"
    default_message = "User not found"


class AuthenticationRequiredError(AuthenticationError):
    """A guard ran on a request that never passed the authentication gate."""

    kind = "authentication_required"
    default_message = "Authentication required"


class InvalidLoginError(AuthenticationError):
    kind = "invalid_login"
    default_message = "Invalid credentials"


# ── 403 ─────────────────────────────────────────────────────────
class ForbiddenError(MarketplaceError):
    kind = "forbidden"
    default_status = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


class InsufficientRoleError(ForbiddenError):
    kind = "insufficient_role"
    default_message = "Access denied. Super Admins only."


class InsufficientPermissionError(ForbiddenError):
    kind = "insufficient_permission"
    default_message = "Insufficient permissions"


class OwnershipDeniedError(ForbiddenError):
    kind = "ownership_denied"
    default_message = "Access denied - resource ownership required"


class AccountSuspendedError(ForbiddenError):
    kind = "account_suspended"
    default_message = "Account is suspended"


# ── 404 / 409 / 400 ─────────────────────────────────────────────
class NotFoundError(MarketplaceError):
    kind = "not_found"
    default_status = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ResourceAbsentError(NotFoundError):
    kind = "resource_absent"


class ConflictError(MarketplaceError):
    kind = "conflict"
    default_status = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class BadRequestError(MarketplaceError):
    kind = "bad_request"


# ── 500 ─────────────────────────────────────────────────────────
class ResourceLookupFailureError(MarketplaceError):
    kind = "resource_lookup_failure"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error checking resource ownership"
