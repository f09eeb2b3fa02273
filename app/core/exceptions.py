"""Custom exception classes and error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error": {
                    "code": code,
                    "message": message,
                    "details": details or {},
                },
            },
        )


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            code="AUTH_FAILED",
            message=message,
        )


class PermissionDeniedError(AppException):
    """Permission denied for the requested action."""

    def __init__(
        self,
        message: str = "Permission denied",
        required_roles: list[str] | None = None,
    ):
        details = {}
        if required_roles:
            details["required_roles"] = required_roles
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            code="PERMISSION_DENIED",
            message=message,
            details=details,
        )


class BadFormatError(AppException):
    """Input could not be parsed (malformed CSV, unknown format, bad query value)."""

    def __init__(
        self,
        message: str = "Bad format",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="BAD_FORMAT",
            message=message,
            details=details,
        )


class InvalidStateError(AppException):
    """Operation is not allowed in the resource's current state."""

    def __init__(
        self,
        message: str = "Invalid state",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="INVALID_STATE",
            message=message,
            details=details,
        )


class ConflictError(AppException):
    """Resource already exists or the action was already performed."""

    def __init__(
        self,
        message: str = "Conflict",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            code="CONFLICT",
            message=message,
            details=details,
        )


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(
        self,
        resource: str = "Resource",
        identifier: str | None = None,
    ):
        details = {}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code="NOT_FOUND",
            message=f"{resource} not found",
            details=details,
        )


class InternalError(AppException):
    """Internal server error."""

    def __init__(
        self,
        message: str = "Internal server error",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="INTERNAL_ERROR",
            message=message,
            details=details,
        )
