from __future__ import annotations

import contextlib
import logging
import socket
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from shared.protocol.constants import MAX_FRAME_BODY
from shared.protocol.errors import ConnectionBroken
from shared.protocol.transport import receive_frame, send_frame

logger = logging.getLogger(__name__)


@dataclass
class PeerConnection:
    """Per-peer state owned by exactly one loop for the lifetime of the socket."""

    sock: socket.socket
    peername: str
    is_open: bool = True
    opened_at: float = field(default_factory=time.time)

    @classmethod
    def from_socket(cls, sock: socket.socket, address: Optional[Any] = None) -> "PeerConnection":
        if address is None:
            with contextlib.suppress(OSError):
                address = sock.getpeername()
        return cls(sock=sock, peername=format_address(address))

    def send_frame(self, body: bytes, max_body: int = MAX_FRAME_BODY) -> None:
        if not self.is_open:
            raise ConnectionBroken(f"Connection to {self.peername} is closed")
        send_frame(self.sock, body, max_body)

    def receive_frame(self) -> bytes:
        if not self.is_open:
            raise ConnectionBroken(f"Connection to {self.peername} is closed")
        return receive_frame(self.sock)

    def close(self, orderly: bool = False) -> None:
        """Release the socket; ``orderly`` signals no-more-sends to the peer first."""
        if not self.is_open:
            return
        self.is_open = False
        if orderly:
            with contextlib.suppress(OSError):
                self.sock.shutdown(socket.SHUT_RDWR)
        self.sock.close()
        logger.debug("Closed connection to %s after %.1fs", self.peername, time.time() - self.opened_at)


def format_address(address: Any) -> str:
    if isinstance(address, tuple) and len(address) >= 2:
        return f"{address[0]}:{address[1]}"
    return str(address) if address else "unknown"


__all__ = ["PeerConnection", "format_address"]
