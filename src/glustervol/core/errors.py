"""Error handling module for glustervol.

This module defines error codes, exception classes, and the error
envelope returned to the container runtime.

Error Response Format (Docker volume plugin protocol):
{
    "Err": "Volume db1 not found"
}

Usage:
    from glustervol.core.errors import VolumeNotFoundError

    raise VolumeNotFoundError(f"Volume {name} not found")
"""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes."""

    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PROTOCOL_VIOLATION = "PROTOCOL_VIOLATION"
    OPERATION_TIMEOUT = "OPERATION_TIMEOUT"
    REMOTE_OPERATION_FAILED = "REMOTE_OPERATION_FAILED"
    REMOTE_REQUEST_FAILED = "REMOTE_REQUEST_FAILED"
    REMOTE_NOT_FOUND = "REMOTE_NOT_FOUND"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    VOLUME_NOT_FOUND = "VOLUME_NOT_FOUND"
    INVALID_OPTION = "INVALID_OPTION"
    GLUSTER_CLI_ERROR = "GLUSTER_CLI_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


class ErrorResponse(BaseModel):
    """Error envelope understood by the container runtime."""

    Err: str


class PluginError(Exception):
    """Base exception for glustervol.

    Every failure reachable from network or CLI input is raised as a
    subclass, so the dispatcher can render it as a per-request error.

    Attributes:
        code: The error code from ErrorCode enum
        message: Human-readable error message
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert exception to ErrorResponse model."""
        return ErrorResponse(Err=self.message or "Unknown error")


class TransportError(PluginError):
    """Network/connection failure reaching the remote manager."""

    def __init__(self, message: str = "Failed to reach remote manager") -> None:
        super().__init__(ErrorCode.TRANSPORT_ERROR, message)


class AuthError(PluginError):
    """Request signing failed."""

    def __init__(self, message: str = "Failed to sign request") -> None:
        super().__init__(ErrorCode.AUTH_ERROR, message)


class ProtocolViolationError(PluginError):
    """Remote manager answered outside the async operation protocol."""

    def __init__(
        self,
        message: str = "Unexpected response from remote manager",
        code: ErrorCode = ErrorCode.PROTOCOL_VIOLATION,
    ) -> None:
        super().__init__(code, message)


class OperationTimeoutError(ProtocolViolationError):
    """Async operation did not reach a terminal state within the poll budget."""

    def __init__(self, message: str = "Remote operation did not complete") -> None:
        super().__init__(message, code=ErrorCode.OPERATION_TIMEOUT)


class RemoteOperationFailedError(PluginError):
    """Polled operation reached an explicit failure status."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        message = f"Remote operation failed ({status})"
        if body:
            message = f"{message}: {body}"
        super().__init__(ErrorCode.REMOTE_OPERATION_FAILED, message)


class RemoteRequestError(PluginError):
    """Direct (non-polled) call answered with a non-success status."""

    def __init__(
        self,
        status: int,
        body: str,
        code: ErrorCode = ErrorCode.REMOTE_REQUEST_FAILED,
    ) -> None:
        self.status = status
        self.body = body
        message = f"Remote request failed ({status})"
        if body:
            message = f"{message}: {body}"
        super().__init__(code, message)


class RemoteNotFoundError(RemoteRequestError):
    """Remote manager does not know the requested resource."""

    def __init__(self, status: int = 404, body: str = "") -> None:
        super().__init__(status, body, code=ErrorCode.REMOTE_NOT_FOUND)


class MalformedResponseError(PluginError):
    """Response payload could not be decoded."""

    def __init__(self, message: str = "Malformed response payload") -> None:
        super().__init__(ErrorCode.MALFORMED_RESPONSE, message)


class VolumeNotFoundError(PluginError):
    """Volume name is unknown even after resynchronizing."""

    def __init__(self, message: str = "Volume not found") -> None:
        super().__init__(ErrorCode.VOLUME_NOT_FOUND, message)


class InvalidOptionError(PluginError):
    """VolumeDriver.Create option could not be interpreted."""

    def __init__(self, message: str = "Invalid volume option") -> None:
        super().__init__(ErrorCode.INVALID_OPTION, message)


class GlusterCliError(PluginError):
    """gluster CLI exited with failure or reported an operation error."""

    def __init__(self, message: str = "gluster command failed") -> None:
        super().__init__(ErrorCode.GLUSTER_CLI_ERROR, message)


class NotImplementedVerbError(PluginError):
    """Protocol verb the plugin does not implement (mount tracking)."""

    def __init__(self, message: str = "Not implemented") -> None:
        super().__init__(ErrorCode.NOT_IMPLEMENTED, message)
