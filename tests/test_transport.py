from __future__ import annotations

from typing import List

import pytest

from shared.protocol import ConnectionBroken, FrameTooLarge, encode_frame, strip_terminator
from shared.protocol.transport import receive_exact, receive_frame, send_all, send_frame


class ChunkedSource:
    """Delivers data at most ``chunk`` bytes per recv, then end-of-stream."""

    def __init__(self, data: bytes, chunk: int = 1) -> None:
        self.data = data
        self.chunk = chunk
        self.calls = 0

    def recv(self, bufsize: int) -> bytes:
        self.calls += 1
        size = min(bufsize, self.chunk)
        piece, self.data = self.data[:size], self.data[size:]
        return piece


class TrickleSink:
    def __init__(self, max_chunk: int = 1, stall_after: int = -1) -> None:
        self.max_chunk = max_chunk
        self.stall_after = stall_after
        self.written = bytearray()
        self.writes: List[int] = []

    def send(self, data) -> int:
        if self.stall_after >= 0 and len(self.written) >= self.stall_after:
            return 0
        piece = bytes(data[: self.max_chunk])
        self.written.extend(piece)
        self.writes.append(len(piece))
        return len(piece)


class ErrorPeer:
    def __init__(self, exc: OSError) -> None:
        self.exc = exc

    def send(self, data) -> int:
        raise self.exc

    def recv(self, bufsize: int) -> bytes:
        raise self.exc


def test_frame_survives_one_byte_reads():
    body = b"chatserve> hello there"
    source = ChunkedSource(encode_frame(body), chunk=1)
    assert strip_terminator(receive_frame(source)) == body
    assert source.calls == len(body) + 4


def test_back_to_back_frames_are_not_merged():
    source = ChunkedSource(encode_frame(b"one") + encode_frame(b"two"), chunk=5)
    assert receive_frame(source) == b"one\0"
    assert receive_frame(source) == b"two\0"


def test_close_mid_header_is_broken_connection_not_malformed():
    with pytest.raises(ConnectionBroken):
        receive_frame(ChunkedSource(b"00", chunk=3))


def test_close_mid_body_is_broken_connection():
    with pytest.raises(ConnectionBroken):
        receive_frame(ChunkedSource(b"010abc", chunk=3))


def test_receive_exact_zero_length_reads_nothing():
    source = ChunkedSource(b"abc")
    assert receive_exact(source, 0) == b""
    assert source.calls == 0


def test_send_all_handles_partial_writes():
    sink = TrickleSink(max_chunk=3)
    data = encode_frame(b"partial writes are fine")
    send_all(sink, data)
    assert bytes(sink.written) == data
    assert max(sink.writes) == 3


def test_zero_byte_write_breaks_connection():
    sink = TrickleSink(max_chunk=2, stall_after=4)
    with pytest.raises(ConnectionBroken):
        send_all(sink, b"0123456789")
    assert bytes(sink.written) == b"0123"


def test_socket_errors_become_broken_connection():
    with pytest.raises(ConnectionBroken):
        send_all(ErrorPeer(BrokenPipeError()), b"data")
    with pytest.raises(ConnectionBroken):
        receive_exact(ErrorPeer(ConnectionResetError()), 3)


def test_oversized_frame_is_rejected_before_any_write():
    sink = TrickleSink(max_chunk=100)
    with pytest.raises(FrameTooLarge):
        send_frame(sink, b"x" * 501)
    assert sink.writes == []
