from __future__ import annotations

import logging
from collections import Counter
from typing import Optional, Tuple

from shared.chat import ChatSession, Console, PeerConnection, Role, SessionOutcome
from shared.protocol.constants import MAX_MESSAGE_LEN

from .acceptor import ConnectionAcceptor

logger = logging.getLogger(__name__)


class ChatServer:
    """Listener role: accept one peer, chat until the session closes, repeat."""

    def __init__(
        self,
        host: str,
        port: int,
        handle: str,
        console: Optional[Console] = None,
        backlog: int = 1,
        max_message_len: int = MAX_MESSAGE_LEN,
    ) -> None:
        self.handle = handle
        self.console = console or Console()
        self.max_message_len = max_message_len
        self.acceptor = ConnectionAcceptor(host, port, backlog=backlog)
        self.outcomes: Counter[SessionOutcome] = Counter()

    @property
    def address(self) -> Tuple[str, int]:
        return self.acceptor.address

    def start(self) -> None:
        self.acceptor.bind()

    def serve_forever(self) -> None:
        if self.acceptor.closed:
            return
        self.start()
        self.acceptor.accept_loop(self._run_session)
        logger.info("Server stopped after %s sessions", sum(self.outcomes.values()))

    def shutdown(self) -> None:
        self.acceptor.shutdown()

    def _run_session(self, connection: PeerConnection) -> SessionOutcome:
        self.console.show(f"Connection from {connection.peername}")
        session = ChatSession(
            connection,
            Role.LISTENER,
            self.handle,
            self.console,
            max_message_len=self.max_message_len,
        )
        outcome = session.run()
        self.outcomes[outcome] += 1
        if not self.acceptor.closed:
            self.console.show("Waiting for a new connection...")
        return outcome
