"""
Turn-taking chat loop for one connected peer.

The listener reads first and the dialer writes first; after that both sides
alternate receive/display and compose/send until the local user types the
quit sentinel or the connection fails. Nothing here retries: every failure is
terminal for the session and the caller decides what happens next.
"""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Optional

from shared.protocol.constants import MAX_MESSAGE_LEN, QUIT_SENTINEL
from shared.protocol.errors import (
    ConnectionBroken,
    FrameTooLarge,
    InvalidMessage,
    MalformedHeader,
    MessageTooLong,
    ProtocolError,
)
from shared.protocol.messages import ChatMessage
from shared.protocol.validator import validate_message_text

from .connection import PeerConnection
from .console import Console

logger = logging.getLogger(__name__)


class Role(StrEnum):
    LISTENER = "listener"
    DIALER = "dialer"


class SessionState(StrEnum):
    AWAITING_PEER_INPUT = "awaiting_peer_input"
    COMPOSING_LOCAL_REPLY = "composing_local_reply"
    CLOSED = "closed"


class SessionOutcome(StrEnum):
    QUIT = "quit"
    PEER_CLOSED = "peer_closed"
    PROTOCOL_ERROR = "protocol_error"


class ChatSession:
    def __init__(
        self,
        connection: PeerConnection,
        role: Role,
        handle: str,
        console: Console,
        max_message_len: int = MAX_MESSAGE_LEN,
    ) -> None:
        self.connection = connection
        self.role = Role(role)
        self.handle = handle
        self.console = console
        self.max_message_len = max_message_len
        self.state = (
            SessionState.AWAITING_PEER_INPUT if self.role is Role.LISTENER else SessionState.COMPOSING_LOCAL_REPLY
        )
        self.outcome: Optional[SessionOutcome] = None
        self.messages_sent = 0
        self.messages_received = 0

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    def run(self) -> SessionOutcome:
        """Drive the session until it closes; the connection is always released."""
        logger.info("Session with %s started as %s", self.connection.peername, self.role)
        try:
            while not self.closed:
                self.step()
        finally:
            self.connection.close()
        logger.info(
            "Session with %s ended: %s (sent=%s, received=%s)",
            self.connection.peername,
            self.outcome,
            self.messages_sent,
            self.messages_received,
        )
        return self.outcome

    def step(self) -> SessionState:
        if self.state is SessionState.AWAITING_PEER_INPUT:
            self._receive_turn()
        elif self.state is SessionState.COMPOSING_LOCAL_REPLY:
            self._compose_turn()
        return self.state

    def compose(self) -> Optional[ChatMessage]:
        """Prompt until the user enters an acceptable message; None means quit."""
        while True:
            text = self.console.prompt_message(self.handle)
            if text == QUIT_SENTINEL:
                return None
            try:
                validate_message_text(text, self.max_message_len)
                return ChatMessage.compose(text, self._wire_handle())
            except MessageTooLong as exc:
                self.console.warn(f"Invalid message length: {exc.message}")
            except InvalidMessage as exc:
                self.console.warn(f"Invalid message: {exc.message}")

    def _wire_handle(self) -> Optional[str]:
        # Only the listener identifies itself on the wire; dialer bodies are bare text.
        return self.handle if self.role is Role.LISTENER else None

    def _receive_turn(self) -> None:
        try:
            payload = self.connection.receive_frame()
        except ConnectionBroken as exc:
            self._fail(SessionOutcome.PEER_CLOSED, exc)
            return
        except MalformedHeader as exc:
            self._fail(SessionOutcome.PROTOCOL_ERROR, exc)
            return
        self.messages_received += 1
        self.console.show(ChatMessage.from_wire(payload).body)
        self.state = SessionState.COMPOSING_LOCAL_REPLY

    def _compose_turn(self) -> None:
        while True:
            message = self.compose()
            if message is None:
                self._quit()
                return
            try:
                self.connection.send_frame(message.to_wire())
            except FrameTooLarge as exc:
                self.console.warn(f"Invalid message length: {exc.message}")
                continue
            except ConnectionBroken as exc:
                self._fail(SessionOutcome.PEER_CLOSED, exc)
                return
            break
        self.messages_sent += 1
        self.state = SessionState.AWAITING_PEER_INPUT

    def _quit(self) -> None:
        logger.info("Local quit requested; closing connection to %s", self.connection.peername)
        self.connection.close(orderly=True)
        self.outcome = SessionOutcome.QUIT
        self.state = SessionState.CLOSED

    def _fail(self, outcome: SessionOutcome, exc: ProtocolError) -> None:
        logger.warning("Session with %s failed: %s", self.connection.peername, exc)
        if outcome is SessionOutcome.PEER_CLOSED:
            self.console.warn("Peer ended connection.")
        else:
            self.console.warn(f"Protocol error from peer: {exc.message}")
        self.connection.close()
        self.outcome = outcome
        self.state = SessionState.CLOSED


__all__ = ["Role", "SessionState", "SessionOutcome", "ChatSession"]
