"""
Service-layer exceptions.

Each class fixes the HTTP status and the stable error code the boundary
translator (api/errors.py) puts in the response envelope. Services raise
these; only the translator turns them into responses.
"""
from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    """Base class for errors mapped to HTTP responses."""

    status_code: int = 400
    error_code: str = "BAD_REQUEST"

    def __init__(self, message: str, *, errors: Optional[list] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(ServiceError):
    """Client input failed validation (400). `errors` holds one entry per field."""
    status_code = 400
    error_code = "VALIDATION_ERROR"


class BadRequestError(ServiceError):
    status_code = 400
    error_code = "BAD_REQUEST"


class NotFoundError(BadRequestError):
    """Operating on a user/tenant that does not exist.

    Kept as a 400 rather than a 404 for compatibility with existing clients.
    """


class BadCredentialsError(BadRequestError):
    """Unknown email or wrong password. Both cases share one message."""

    def __init__(self, message: str = "Email or Password does not match") -> None:
        super().__init__(message)


class ConflictError(ServiceError):
    status_code = 400
    error_code = "CONFLICT"


class AuthenticationError(ServiceError):
    """Missing, invalid, expired or revoked credential (401)."""
    status_code = 401
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized", *, reason: Optional[str] = None) -> None:
        super().__init__(message)
        # logged, never sent to the client
        self.reason = reason


class ForbiddenError(ServiceError):
    """Valid credential, insufficient role (403)."""
    status_code = 403
    error_code = "FORBIDDEN"

    def __init__(self, message: str = "You don't have enough permissions") -> None:
        super().__init__(message)


class ServerError(ServiceError):
    """Unexpected persistence or internal fault (500)."""
    status_code = 500
    error_code = "INTERNAL_ERROR"


class ConfigurationError(ServerError):
    """Signing key material is missing or unreadable (500)."""


__all__ = [
    "ServiceError",
    "ValidationError",
    "BadRequestError",
    "NotFoundError",
    "BadCredentialsError",
    "ConflictError",
    "AuthenticationError",
    "ForbiddenError",
    "ServerError",
    "ConfigurationError",
]
