from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import (
    ENCODING,
    HANDLE_PATTERN,
    HANDLE_SEPARATOR,
    MAX_HANDLE_LEN,
    MAX_MESSAGE_LEN,
)
from .errors import InvalidHandle, InvalidMessage, MessageTooLong
from .framing import strip_terminator

_PREFIX_RE = re.compile(rf"^([A-Za-z0-9_]{{1,{MAX_HANDLE_LEN}}}){re.escape(HANDLE_SEPARATOR)}")


class Identity(BaseModel):
    """A participant's display handle."""

    model_config = ConfigDict(frozen=True)

    handle: str = Field(..., min_length=1, max_length=MAX_HANDLE_LEN, pattern=HANDLE_PATTERN)

    @classmethod
    def from_handle(cls, handle: str) -> "Identity":
        try:
            return cls(handle=handle)
        except ValidationError as exc:
            raise InvalidHandle(_first_error(exc)) from exc


class ChatMessage(BaseModel):
    """Logical unit exchanged between the two participants."""

    model_config = ConfigDict(frozen=True)

    sender_handle: Optional[str] = Field(
        default=None, min_length=1, max_length=MAX_HANDLE_LEN, pattern=HANDLE_PATTERN
    )
    text: str = Field(default="", max_length=MAX_MESSAGE_LEN)

    @classmethod
    def compose(cls, text: str, sender_handle: Optional[str] = None) -> "ChatMessage":
        try:
            return cls(sender_handle=sender_handle, text=text)
        except ValidationError as exc:
            fields = {err["loc"][0] for err in exc.errors() if err["loc"]}
            if "sender_handle" in fields:
                raise InvalidHandle(_first_error(exc)) from exc
            if any(err["type"] == "string_too_long" for err in exc.errors()):
                raise MessageTooLong(
                    f"Message is {len(text)} characters; the limit is {MAX_MESSAGE_LEN}"
                ) from exc
            raise InvalidMessage(_first_error(exc)) from exc

    @property
    def body(self) -> str:
        if self.sender_handle:
            return f"{self.sender_handle}{HANDLE_SEPARATOR}{self.text}"
        return self.text

    def to_wire(self) -> bytes:
        return self.body.encode(ENCODING)

    @classmethod
    def from_wire(cls, payload: bytes) -> "ChatMessage":
        """Build a message from a received body, splitting off a ``handle> `` prefix if present."""
        body = strip_terminator(payload).decode(ENCODING, errors="replace")
        match = _PREFIX_RE.match(body)
        if match:
            return cls.model_construct(sender_handle=match.group(1), text=body[match.end():])
        return cls.model_construct(sender_handle=None, text=body)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    return errors[0]["msg"] if errors else str(exc)


__all__ = ["Identity", "ChatMessage"]
