"""
Blocking send/receive loops that tolerate partial writes and reads.

Anything with ``send(bytes) -> int`` / ``recv(int) -> bytes`` works as a sink or
source; plain sockets satisfy both.
"""
from __future__ import annotations

import logging
from typing import Protocol

from .constants import HEADER_WIDTH, MAX_MESSAGE_LEN
from .errors import ConnectionBroken
from .framing import decode_header, encode_frame

logger = logging.getLogger(__name__)


class Sink(Protocol):
    def send(self, data: bytes) -> int: ...


class Source(Protocol):
    def recv(self, bufsize: int) -> bytes: ...


def send_all(sink: Sink, data: bytes) -> None:
    view = memoryview(data)
    while len(view):
        try:
            sent = sink.send(view)
        except OSError as exc:
            raise ConnectionBroken(f"Send failed: {exc}") from exc
        if sent <= 0:
            raise ConnectionBroken(f"Peer stopped accepting data with {len(view)} bytes unsent")
        view = view[sent:]


def receive_exact(source: Source, length: int) -> bytes:
    buf = bytearray()
    while len(buf) < length:
        try:
            chunk = source.recv(length - len(buf))
        except OSError as exc:
            raise ConnectionBroken(f"Receive failed: {exc}") from exc
        if not chunk:
            raise ConnectionBroken(f"Peer closed connection after {len(buf)} of {length} bytes")
        buf.extend(chunk)
    return bytes(buf)


def receive_frame(source: Source) -> bytes:
    """Read one complete frame and return its body, terminator included."""
    header = receive_exact(source, HEADER_WIDTH)
    length = decode_header(header)
    body = receive_exact(source, length)
    logger.debug("Received frame of %s bytes", length)
    return body


def send_frame(sink: Sink, body: bytes, max_body: int = MAX_MESSAGE_LEN) -> None:
    data = encode_frame(body, max_body)
    send_all(sink, data)
    logger.debug("Sent frame of %s bytes", len(data))


__all__ = ["Sink", "Source", "send_all", "receive_exact", "receive_frame", "send_frame"]
