"""
Shared protocol package that centralizes constants, framing, the reliable
transport loops, message models and validation helpers for both roles.
"""

from .constants import (
    ENCODING,
    HANDLE_SEPARATOR,
    HEADER_WIDTH,
    MAX_FRAME_BODY,
    MAX_HANDLE_LEN,
    MAX_MESSAGE_LEN,
    QUIT_SENTINEL,
    TERMINATOR,
)
from .errors import (
    AddressInUse,
    ConnectFailed,
    ConnectionBroken,
    ErrorCode,
    FrameTooLarge,
    InvalidAddress,
    InvalidHandle,
    InvalidMessage,
    ListenerClosed,
    MalformedHeader,
    MessageTooLong,
    PermissionDenied,
    ProtocolError,
)
from .framing import Frame, decode_header, encode_frame, parse_frame, strip_terminator
from .messages import ChatMessage, Identity
from .transport import receive_exact, receive_frame, send_all, send_frame
from .validator import parse_host_port, validate_handle, validate_hostname, validate_message_text, validate_port

__all__ = [
    "ENCODING",
    "HANDLE_SEPARATOR",
    "HEADER_WIDTH",
    "MAX_FRAME_BODY",
    "MAX_HANDLE_LEN",
    "MAX_MESSAGE_LEN",
    "QUIT_SENTINEL",
    "TERMINATOR",
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
    "Frame",
    "encode_frame",
    "decode_header",
    "strip_terminator",
    "parse_frame",
    "ChatMessage",
    "Identity",
    "send_all",
    "receive_exact",
    "receive_frame",
    "send_frame",
    "validate_handle",
    "validate_message_text",
    "validate_hostname",
    "validate_port",
    "parse_host_port",
]
