"""Application exception hierarchy following RFC 7807 Problem Details.

Every body also carries an ``error`` key with a short human message, which
is what the storefront and admin clients display.
"""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception following RFC 7807.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.error_detail = detail or {}

        super().__init__(
            status_code=status_code,
            detail={
                "type": f"https://api.marketplace.local/errors/{error_code}",
                "title": error_code.replace("_", " ").title(),
                "status": status_code,
                "detail": message,
                "error": message,
                "instance": None,  # Set by exception handler
                **self.error_detail,
            },
        )


# ============================================================================
# Authentication & Authorization Exceptions (401, 403)
# ============================================================================


class AuthenticationError(AppException):
    """Caller could not be identified."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="authentication_required",
            message=message,
        )


class InvalidCredentialsError(AppException):
    """Invalid login credentials."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="invalid_credentials",
            message=message,
        )


class TokenExpiredError(AppException):
    """JWT token has expired."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="token_expired",
            message=message,
        )


class InvalidTokenError(AppException):
    """JWT token is invalid."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="invalid_token",
            message=message,
        )


class ForbiddenError(AppException):
    """Caller is identified but may not perform the operation."""

    def __init__(
        self,
        message: str = "Forbidden",
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="forbidden",
            message=message,
            detail=detail,
        )


class AdminRequiredError(ForbiddenError):
    """Operation is restricted to administrators."""

    def __init__(self) -> None:
        super().__init__(
            message="Admin access required",
            detail={"required_role": "admin"},
        )


# ============================================================================
# Resource Exceptions (404)
# ============================================================================


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(
        self,
        resource: str,
        identifier: str | list[str] | None = None,
    ) -> None:
        message = f"{resource} not found"
        detail: dict[str, Any] = {"resource": resource}
        if isinstance(identifier, list):
            message = f"{resource} not found: {', '.join(identifier)}"
            detail["ids"] = identifier
        elif identifier:
            message = f"{resource} with id '{identifier}' not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found",
            message=message,
            detail=detail,
        )


class AlreadyExistsError(AppException):
    """Resource already exists (conflict)."""

    def __init__(
        self,
        resource: str,
        field: str,
        value: str,
    ) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="already_exists",
            message=f"{resource} with {field}='{value}' already exists",
            detail={"resource": resource, "field": field, "value": value},
        )


# ============================================================================
# Validation & Constraint Exceptions (400)
# ============================================================================


class ValidationError(AppException):
    """Request validation error."""

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="validation_error",
            message=message,
            detail={"errors": errors or []},
        )


class ConstraintError(AppException):
    """A guard rejected one or more records; nothing was written.

    ``violations`` holds every ``{"id", "reason"}`` pair found, so callers
    get the complete list in one round trip.
    """

    def __init__(self, violations: list[dict[str, str]]) -> None:
        self.violations = violations
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="constraint_violation",
            message="; ".join(v["reason"] for v in violations),
            detail={"violations": violations},
        )


class CircularReferenceError(ValidationError):
    """Category hierarchy change would create a cycle."""

    def __init__(self, message: str, category_id: str) -> None:
        super().__init__(
            message=message,
            errors=[{"field": "parent_id", "category_id": category_id}],
        )


# ============================================================================
# Server-side Exceptions (500)
# ============================================================================


class UnknownActionError(AppException):
    """Action name is not in the resource's dispatch table."""

    def __init__(self, resource: str, action: str, allowed: list[str]) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="unknown_action",
            message=f"Unknown action: {action}",
            detail={
                "message": f"'{action}' is not a bulk action for {resource}",
                "details": {"resource": resource, "action": action, "allowed": allowed},
            },
        )


class StorageError(AppException):
    """Database commit failed; the transaction was rolled back."""

    def __init__(self, message: str = "Failed to commit changes") -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="storage_error",
            message=message,
        )
