from __future__ import annotations

from typing import Iterable, List

import pytest

from shared.chat.console import Console


class ScriptedConsole(Console):
    """Console fed from a list of lines; raises EOFError once they run out."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: List[str] = list(lines)
        self.prompts: List[str] = []
        self.shown: List[str] = []
        self.warnings: List[str] = []
        super().__init__(self._next_line, self.shown.append, self.warnings.append)

    def _next_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._lines:
            raise EOFError
        return self._lines.pop(0)


@pytest.fixture
def scripted_console():
    return ScriptedConsole
