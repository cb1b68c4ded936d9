from __future__ import annotations

import logging
import socket
from typing import Optional

from shared.chat.connection import PeerConnection
from shared.protocol.errors import ConnectFailed

logger = logging.getLogger(__name__)


def connect(host: str, port: int, timeout: Optional[float] = None) -> PeerConnection:
    """Open a TCP connection to the listener, trying every address the host resolves to."""
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as exc:
        raise ConnectFailed(f"Could not connect to {host}:{port}: {exc}") from exc
    # The timeout only bounds connection setup; chat turns block indefinitely.
    sock.settimeout(None)
    connection = PeerConnection.from_socket(sock)
    logger.info("Connected to %s", connection.peername)
    return connection


__all__ = ["connect"]
