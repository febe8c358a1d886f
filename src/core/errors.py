# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application error taxonomy.

Every domain error derives from one of the classes below so the API
boundary can render it with the right status code and the
``{"error": {"code", "message", "details"}}`` envelope.

Domains keep their own hierarchy and mix a taxonomy class in:

    class FrameworkServiceError(Exception): ...
    class FrameworkNotFoundError(FrameworkServiceError, NotFoundError): ...

Example:
    >>> raise ConflictError("Framework code already exists", code="DUPLICATE_CODE")
"""

from typing import Any


class AppError(Exception):
    """Base class for errors that map to an HTTP response.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
        status_code: HTTP status code.
        details: Optional structured details.
    """

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Render the error body (without the outer envelope)."""
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    """Malformed or semantically invalid input."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    default_code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    """Authenticated but not allowed to perform the action."""

    status_code = 403
    default_code = "FORBIDDEN"


class NotFoundError(AppError):
    """Resource is absent, soft-deleted, or owned by another tenant."""

    status_code = 404
    default_code = "NOT_FOUND"


class ConflictError(AppError):
    """Duplicate unique key or invalid state transition."""

    status_code = 409
    default_code = "CONFLICT"


class RateLimitError(AppError):
    """Client exceeded its rate limit."""

    status_code = 429
    default_code = "RATE_LIMITED"


class InternalError(AppError):
    """Unexpected failure."""

    status_code = 500
    default_code = "INTERNAL_ERROR"
