"""Error handling module for brokerhub.

This module defines error codes, exception classes, and response models.

Error Response Format:
{
    "error": {
        "code": "INSTANCE_ALREADY_EXISTS",
        "message": "Service instance already exists"
    }
}

Usage:
    from brokerhub.core.errors import InstanceDoesNotExistError

    # Raise with default message
    raise InstanceDoesNotExistError("si-1")
"""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes."""

    ASYNC_REQUIRED = "ASYNC_REQUIRED"
    INSTANCE_ALREADY_EXISTS = "INSTANCE_ALREADY_EXISTS"
    INSTANCE_DOES_NOT_EXIST = "INSTANCE_DOES_NOT_EXIST"
    CONCURRENT_OPERATION = "CONCURRENT_OPERATION"
    BACKEND_ERROR = "BACKEND_ERROR"


class ErrorDetail(BaseModel):
    """Error detail containing code and message."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error response format."""

    error: ErrorDetail


class BrokerError(Exception):
    """Base exception for brokerhub.

    Attributes:
        code: The error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code a transport layer should return
    """

    def __init__(self, code: ErrorCode, message: str, status_code: int) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse model."""
        return ErrorResponse(
            error=ErrorDetail(code=self.code.value, message=self.message)
        )


class AsyncRequiredError(BrokerError):
    """422 Unprocessable Entity - Backend only supports asynchronous operations."""

    def __init__(
        self, message: str = "This service plan requires client support for asynchronous operations"
    ) -> None:
        super().__init__(ErrorCode.ASYNC_REQUIRED, message, 422)


class InstanceAlreadyExistsError(BrokerError):
    """409 Conflict - A live instance with this id already exists."""

    def __init__(self, instance_id: str, message: str | None = None) -> None:
        self.instance_id = instance_id
        super().__init__(
            ErrorCode.INSTANCE_ALREADY_EXISTS,
            message or f"Service instance already exists: {instance_id}",
            409,
        )


class InstanceDoesNotExistError(BrokerError):
    """404 Not Found - Instance absent or soft-deleted."""

    def __init__(self, instance_id: str, message: str | None = None) -> None:
        self.instance_id = instance_id
        super().__init__(
            ErrorCode.INSTANCE_DOES_NOT_EXIST,
            message or f"Service instance does not exist: {instance_id}",
            404,
        )


class ConcurrentOperationError(BrokerError):
    """422 Unprocessable Entity - Another operation is still in progress."""

    def __init__(self, instance_id: str, message: str | None = None) -> None:
        self.instance_id = instance_id
        super().__init__(
            ErrorCode.CONCURRENT_OPERATION,
            message or f"Another operation is in progress for service instance: {instance_id}",
            422,
        )


class BackendError(BrokerError):
    """502 Bad Gateway - Provisioning backend raised.

    The controller never lets this escape a lifecycle call; it is captured and
    recorded as a FAILED last operation.
    """

    def __init__(self, message: str = "Provisioning backend failed") -> None:
        super().__init__(ErrorCode.BACKEND_ERROR, message, 502)

    @classmethod
    def wrap(cls, exc: BaseException) -> "BackendError":
        """Wrap a raw backend exception, keeping it as ``__cause__``."""
        if isinstance(exc, BackendError):
            return exc
        err = cls(str(exc) or type(exc).__name__)
        err.__cause__ = exc
        return err
