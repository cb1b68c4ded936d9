from __future__ import annotations

import socket
import threading
import time

import pytest

from server.core import ChatServer, ConnectionAcceptor
from shared.chat import SessionOutcome
from shared.protocol import (
    AddressInUse,
    ConnectionBroken,
    ListenerClosed,
    receive_frame,
    send_frame,
    strip_terminator,
)


def _connect(port: int) -> socket.socket:
    return socket.create_connection(("127.0.0.1", port), timeout=5)


def test_sequential_sessions_share_one_listening_socket():
    acceptor = ConnectionAcceptor("127.0.0.1", 0, backlog=2)
    listener = acceptor.bind()
    port = acceptor.address[1]
    sessions = acceptor.sessions()
    received = []
    previous = None
    try:
        for body in (b"first", b"second"):
            with _connect(port) as client:
                send_frame(client, body)
                connection = next(sessions)
                if previous is not None:
                    assert not previous.is_open
                received.append(strip_terminator(connection.receive_frame()))
                previous = connection
            assert acceptor.bind() is listener
    finally:
        acceptor.shutdown()
    with pytest.raises(StopIteration):
        next(sessions)
    assert received == [b"first", b"second"]
    assert not previous.is_open


def test_accept_loop_survives_failed_session():
    acceptor = ConnectionAcceptor("127.0.0.1", 0, backlog=4)
    acceptor.bind()
    port = acceptor.address[1]
    vanished = _connect(port)
    vanished.close()
    survivor = _connect(port)
    send_frame(survivor, b"still here")
    seen = []

    def handler(connection):
        seen.append(strip_terminator(connection.receive_frame()))
        acceptor.shutdown()

    try:
        acceptor.accept_loop(handler)
    finally:
        survivor.close()
        acceptor.shutdown()
    assert seen == [b"still here"]


def test_accept_loop_absorbs_handler_errors():
    acceptor = ConnectionAcceptor("127.0.0.1", 0)
    acceptor.bind()
    client = _connect(acceptor.address[1])
    calls = []

    def handler(connection):
        calls.append(connection.peername)
        acceptor.shutdown()
        raise ConnectionBroken("boom")

    try:
        acceptor.accept_loop(handler)
    finally:
        client.close()
    assert len(calls) == 1


def test_shutdown_releases_blocked_accept():
    acceptor = ConnectionAcceptor("127.0.0.1", 0)
    acceptor.bind()
    stopped = threading.Event()

    def _serve():
        acceptor.accept_loop(lambda connection: None)
        stopped.set()

    thread = threading.Thread(target=_serve, daemon=True)
    thread.start()
    time.sleep(0.1)
    acceptor.shutdown()
    acceptor.shutdown()
    assert stopped.wait(timeout=5)
    assert acceptor.closed


def test_shutdown_before_serving_yields_nothing():
    acceptor = ConnectionAcceptor("127.0.0.1", 0)
    acceptor.shutdown()
    assert list(acceptor.sessions()) == []


def test_bind_after_shutdown_does_not_reopen_listener():
    acceptor = ConnectionAcceptor("127.0.0.1", 0)
    acceptor.bind()
    acceptor.shutdown()
    with pytest.raises(ListenerClosed):
        acceptor.bind()
    assert acceptor.closed


def test_serve_forever_after_shutdown_returns_without_binding(scripted_console):
    server = ChatServer("127.0.0.1", 0, "chatserve", console=scripted_console([]))
    server.shutdown()
    server.serve_forever()
    assert server.address == ("127.0.0.1", 0)
    assert sum(server.outcomes.values()) == 0


def test_bind_reports_port_in_use():
    first = ConnectionAcceptor("127.0.0.1", 0)
    first.bind()
    try:
        second = ConnectionAcceptor("127.0.0.1", first.address[1])
        with pytest.raises(AddressInUse):
            second.bind()
    finally:
        first.shutdown()


def test_server_returns_to_accepting_after_each_session(scripted_console):
    console = scripted_console(["reply one", "\\quit"])
    server = ChatServer("127.0.0.1", 0, "chatserve", console=console)
    server.start()
    port = server.address[1]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    try:
        with _connect(port) as first:
            send_frame(first, b"hi")
            assert receive_frame(first) == b"chatserve> reply one\0"

        with _connect(port) as second:
            send_frame(second, b"again")
            assert second.recv(16) == b""
    finally:
        server.shutdown()
    thread.join(timeout=5)

    assert not thread.is_alive()
    assert server.outcomes[SessionOutcome.PEER_CLOSED] == 1
    assert server.outcomes[SessionOutcome.QUIT] == 1
    assert "hi" in console.shown
    assert "again" in console.shown
