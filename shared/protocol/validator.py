from __future__ import annotations

import re
from typing import Tuple

from .constants import MAX_MESSAGE_LEN
from .errors import InvalidAddress, InvalidHandle, MessageTooLong
from .messages import Identity

MIN_PORT = 1
MAX_PORT = 65535
MAX_HOST_LABEL = 63
MAX_HOSTNAME = 255

_HOSTNAME_CHARS = re.compile(r"^[A-Za-z0-9.-]+$")


def validate_handle(raw: str) -> str:
    """Validate a user-entered handle (1-10 chars, alphanumerics or '_')."""
    handle = raw[:-1] if raw.endswith("\n") else raw
    if not handle:
        raise InvalidHandle("handle cannot be empty")
    return Identity.from_handle(handle).handle


def validate_message_text(text: str, max_len: int = MAX_MESSAGE_LEN) -> str:
    if len(text) > max_len:
        raise MessageTooLong(f"Message is {len(text)} characters; the limit is {max_len}")
    return text


def validate_hostname(hostname: str) -> str:
    """Hostname check following RFC 1123 character and length rules."""
    if not hostname:
        raise InvalidAddress("hostname cannot be empty")
    if not _HOSTNAME_CHARS.match(hostname):
        raise InvalidAddress("hostname may contain only alphanumerics, '.' and '-'")
    if len(hostname) > MAX_HOSTNAME:
        raise InvalidAddress(f"hostname length must be at most {MAX_HOSTNAME}")
    if any(len(label) > MAX_HOST_LABEL for label in hostname.split(".")):
        raise InvalidAddress(f"hostname label length is at most {MAX_HOST_LABEL}")
    if hostname[0] in ".-" or hostname[-1] in ".-":
        raise InvalidAddress("hostname cannot begin or end with '.' or '-'")
    return hostname


def validate_port(value: object) -> int:
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidAddress("port must contain only digits")
    port = int(text)
    if not (MIN_PORT <= port <= MAX_PORT):
        raise InvalidAddress(f"port must be between {MIN_PORT} and {MAX_PORT}")
    return port


def parse_host_port(address: str) -> Tuple[str, int]:
    """Split ``host:port`` and validate both halves."""
    host, sep, port = address.rpartition(":")
    if not sep:
        raise InvalidAddress(f"Expected host:port, got {address!r}")
    return validate_hostname(host), validate_port(port)


__all__ = [
    "validate_handle",
    "validate_message_text",
    "validate_hostname",
    "validate_port",
    "parse_host_port",
]
