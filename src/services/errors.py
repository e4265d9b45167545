"""Domain errors raised by services and rendered by the API layer."""

from enum import StrEnum

from fastapi import status


class ErrorCode(StrEnum):
    """Stable machine-readable error codes returned to clients."""

    INVALID_INPUT = "invalid_input"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


class ServiceError(Exception):
    """Base class for expected, client-correctable failures."""

    code: ErrorCode
    status_code: int

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Serialize the error for a JSON response body."""
        return {"code": self.code.value, "detail": self.message}


class InvalidInputError(ServiceError):
    """Malformed or missing request fields, or an invalid refresh token."""

    code = ErrorCode.INVALID_INPUT
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(ServiceError):
    """Credential mismatch or access to a resource owned by someone else."""

    code = ErrorCode.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    code = ErrorCode.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    """Uniqueness violation, such as an already registered email."""

    code = ErrorCode.CONFLICT
    status_code = status.HTTP_409_CONFLICT
