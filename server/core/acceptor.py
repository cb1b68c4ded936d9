from __future__ import annotations

import contextlib
import errno
import logging
import socket
from collections.abc import Callable, Iterator
from typing import Any, Optional, Tuple

from shared.chat.connection import PeerConnection
from shared.protocol.errors import AddressInUse, ListenerClosed, PermissionDenied, ProtocolError

logger = logging.getLogger(__name__)

SessionHandler = Callable[[PeerConnection], Any]


class ConnectionAcceptor:
    """Owns the listening socket and hands out one accepted peer at a time."""

    def __init__(self, host: str, port: int, backlog: int = 1) -> None:
        self.host = host
        self.port = port
        self.backlog = backlog
        self._sock: Optional[socket.socket] = None
        self._closed = False

    @property
    def address(self) -> Tuple[str, int]:
        if self._sock is None:
            return self.host, self.port
        return self._sock.getsockname()[:2]

    @property
    def closed(self) -> bool:
        return self._closed

    def bind(self) -> socket.socket:
        if self._closed:
            raise ListenerClosed(f"Acceptor for port {self.port} has been shut down")
        if self._sock is not None:
            return self._sock
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
            sock.listen(self.backlog)
        except OSError as exc:
            sock.close()
            if exc.errno == errno.EADDRINUSE:
                raise AddressInUse(f"Port {self.port} is already in use") from exc
            if exc.errno in (errno.EACCES, errno.EPERM):
                raise PermissionDenied(f"Not allowed to bind port {self.port}") from exc
            raise
        self._sock = sock
        logger.info("Listening on %s:%s", *self.address)
        return sock

    def sessions(self) -> Iterator[PeerConnection]:
        """
        Yield accepted peers forever.

        Each peer's socket is released when the consumer asks for the next one.
        The sequence only ends after ``shutdown()``.
        """
        if self._closed:
            return
        listener = self.bind()
        while not self._closed:
            try:
                conn, addr = listener.accept()
            except (ConnectionAbortedError, InterruptedError) as exc:
                logger.debug("Accept interrupted: %s", exc)
                continue
            except OSError:
                if self._closed:
                    break
                raise
            connection = PeerConnection.from_socket(conn, addr)
            logger.info("Accepted connection from %s", connection.peername)
            try:
                yield connection
            finally:
                connection.close()
        logger.info("Acceptor stopped")

    def accept_loop(self, handler: SessionHandler) -> None:
        """Run ``handler`` on each peer in turn; a failed session never stops the loop."""
        for connection in self.sessions():
            try:
                handler(connection)
            except (ProtocolError, OSError) as exc:
                logger.warning("Session with %s aborted: %s", connection.peername, exc)

    def shutdown(self) -> None:
        """Stop accepting and release the listening socket. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        sock, self._sock = self._sock, None
        if sock is None:
            return
        # shutdown() is what wakes a thread blocked in accept() on Linux.
        with contextlib.suppress(OSError):
            sock.shutdown(socket.SHUT_RDWR)
        sock.close()
        logger.info("Listening socket closed")

    def __enter__(self) -> "ConnectionAcceptor":
        self.bind()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()


__all__ = ["ConnectionAcceptor", "SessionHandler"]
