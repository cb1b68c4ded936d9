from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """Domain specific error codes."""

    MALFORMED_HEADER = 1001
    CONNECTION_BROKEN = 1002
    FRAME_TOO_LARGE = 1003
    MESSAGE_TOO_LONG = 1004
    INVALID_HANDLE = 1005
    INVALID_ADDRESS = 1006
    ADDRESS_IN_USE = 1007
    PERMISSION_DENIED = 1008
    CONNECT_FAILED = 1009
    INVALID_MESSAGE = 1010
    LISTENER_CLOSED = 1011


class ProtocolError(Exception):
    """Structured protocol exception carrying an error code + message."""

    code: ErrorCode = ErrorCode.MALFORMED_HEADER

    def __init__(self, message: str = "", code: Optional[ErrorCode] = None) -> None:
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(f"{self.code.name} ({int(self.code)}): {message}")

    def to_payload(self) -> dict:
        """Map error into a dict suitable for logging or display."""
        return {"error_code": int(self.code), "error_name": self.code.name, "error_message": self.message}


class MalformedHeader(ProtocolError):
    """Frame header is not three ASCII decimal digits (or frame is inconsistent)."""

    code = ErrorCode.MALFORMED_HEADER


class ConnectionBroken(ProtocolError):
    """Peer went away mid-transfer: zero-byte read/write or socket error."""

    code = ErrorCode.CONNECTION_BROKEN


class FrameTooLarge(ProtocolError):
    code = ErrorCode.FRAME_TOO_LARGE


class MessageTooLong(ProtocolError):
    code = ErrorCode.MESSAGE_TOO_LONG


class InvalidMessage(ProtocolError):
    """Composed text that cannot be represented, e.g. unpaired surrogates."""

    code = ErrorCode.INVALID_MESSAGE


class InvalidHandle(ProtocolError):
    code = ErrorCode.INVALID_HANDLE


class InvalidAddress(ProtocolError):
    code = ErrorCode.INVALID_ADDRESS


class AddressInUse(ProtocolError):
    code = ErrorCode.ADDRESS_IN_USE


class PermissionDenied(ProtocolError):
    code = ErrorCode.PERMISSION_DENIED


class ConnectFailed(ProtocolError):
    code = ErrorCode.CONNECT_FAILED


class ListenerClosed(ProtocolError):
    code = ErrorCode.LISTENER_CLOSED


__all__ = [
    "ErrorCode",
    "ProtocolError",
    "MalformedHeader",
    "ConnectionBroken",
    "FrameTooLarge",
    "MessageTooLong",
    "InvalidMessage",
    "InvalidHandle",
    "InvalidAddress",
    "AddressInUse",
    "PermissionDenied",
    "ConnectFailed",
    "ListenerClosed",
]
