from __future__ import annotations

from dataclasses import dataclass

from .constants import HEADER_WIDTH, MAX_HEADER_VALUE, MAX_MESSAGE_LEN, TERMINATOR
from .errors import FrameTooLarge, MalformedHeader


@dataclass(frozen=True)
class Frame:
    """One wire unit: zero-padded length header, body, null terminator."""

    body: bytes

    @property
    def length(self) -> int:
        # The terminator is counted as part of the advertised length.
        return len(self.body) + len(TERMINATOR)

    @property
    def header(self) -> bytes:
        return f"{self.length:0{HEADER_WIDTH}d}".encode("ascii")

    def to_bytes(self) -> bytes:
        return self.header + self.body + TERMINATOR


def encode_frame(body: bytes, max_body: int = MAX_MESSAGE_LEN) -> bytes:
    """Encode body into header + body + terminator."""
    if len(body) > max_body:
        raise FrameTooLarge(f"Body of {len(body)} bytes exceeds limit of {max_body}")
    frame = Frame(body)
    if frame.length > MAX_HEADER_VALUE:
        raise FrameTooLarge(f"Length {frame.length} does not fit in a {HEADER_WIDTH}-digit header")
    return frame.to_bytes()


def decode_header(header: bytes) -> int:
    """Parse the header into the number of bytes (terminator included) that follow."""
    if len(header) != HEADER_WIDTH or not header.isdigit():
        raise MalformedHeader(f"Invalid frame header {header!r}")
    return int(header)


def strip_terminator(payload: bytes) -> bytes:
    """Drop the trailing terminator delivered with every received body."""
    if payload.endswith(TERMINATOR):
        return payload[: -len(TERMINATOR)]
    return payload


def parse_frame(data: bytes) -> Frame:
    """Decode one complete frame held in memory."""
    length = decode_header(data[:HEADER_WIDTH])
    payload = data[HEADER_WIDTH:]
    if len(payload) != length:
        raise MalformedHeader(f"Header announces {length} bytes, got {len(payload)}")
    if not payload.endswith(TERMINATOR):
        raise MalformedHeader("Frame is missing its terminator")
    return Frame(strip_terminator(payload))


__all__ = ["Frame", "encode_frame", "decode_header", "strip_terminator", "parse_frame"]
