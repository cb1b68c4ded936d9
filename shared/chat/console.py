from __future__ import annotations

import sys
from functools import partial
from typing import Callable, Optional

from shared.protocol.constants import HANDLE_SEPARATOR, QUIT_SENTINEL
from shared.protocol.errors import InvalidHandle
from shared.protocol.validator import validate_handle

InputFunc = Callable[[str], str]
OutputFunc = Callable[[str], None]

HANDLE_PROMPT = "Please enter the client handle: "


class Console:
    """Line-oriented terminal I/O used by the chat loop."""

    def __init__(
        self,
        input_func: InputFunc = input,
        output_func: OutputFunc = print,
        error_func: Optional[OutputFunc] = None,
    ) -> None:
        self._input = input_func
        self._output = output_func
        self._error = error_func or partial(print, file=sys.stderr)

    def read_line(self, prompt: str) -> Optional[str]:
        """Return one line without its newline, or None once input is exhausted."""
        try:
            line = self._input(prompt)
        except EOFError:
            return None
        return line[:-1] if line.endswith("\n") else line

    def prompt_handle(self, prompt: str = HANDLE_PROMPT) -> Optional[str]:
        while True:
            raw = self.read_line(prompt)
            if raw is None:
                return None
            try:
                return validate_handle(raw)
            except InvalidHandle as exc:
                self.warn(f"Invalid handle: {exc.message}")

    def prompt_message(self, handle: str) -> str:
        # EOF on the terminal ends the conversation like an explicit quit.
        line = self.read_line(f"{handle}{HANDLE_SEPARATOR}")
        return QUIT_SENTINEL if line is None else line

    def show(self, text: str) -> None:
        self._output(text)

    def warn(self, text: str) -> None:
        self._error(text)


__all__ = ["Console", "HANDLE_PROMPT"]
