from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, TextIO


Level = Literal["info", "warning", "error"]

_PREFIX = {"info": "", "warning": "WARNING: ", "error": "ERROR: "}


@dataclass
class _Entry:
    level: Level
    message: str
    count: int = 1


class ConsoleLog:
    """
    Levelled diagnostics sink for the compile pipeline.

    Features:
      - warnings and errors are echoed with a ``WARNING:`` / ``ERROR:`` prefix
      - coalescing of consecutive identical messages (echoed once, counted xN)
      - bounded history (drops oldest entries beyond max_entries)
      - ``echo=False`` keeps the history without printing (tests, notebooks)
    """

    def __init__(
        self, *, echo: bool = True, stream: Optional[TextIO] = None, max_entries: int = 2000
    ) -> None:
        self._entries: List[_Entry] = []
        self._echo = bool(echo)
        # None resolves to sys.stdout at print time
        self._stream = stream
        self._max_entries = int(max_entries)

    def clear(self) -> None:
        self._entries.clear()

    def info(self, message: str) -> None:
        self._add("info", message)

    def warning(self, message: str) -> None:
        self._add("warning", message)

    def error(self, message: str) -> None:
        self._add("error", message)

    @property
    def entries(self) -> List[str]:
        """History rendered as text, one line per (coalesced) entry."""
        return [self._format(e) for e in self._entries]

    def count(self, level: Level) -> int:
        return sum(e.count for e in self._entries if e.level == level)

    # -------------------------
    # Internals
    # -------------------------
    @staticmethod
    def _format(e: _Entry) -> str:
        suffix = f" (x{e.count})" if e.count > 1 else ""
        return f"{_PREFIX[e.level]}{e.message}{suffix}"

    def _add(self, level: Level, message: str) -> None:
        msg = "" if message is None else str(message)

        if self._entries and self._entries[-1].level == level and self._entries[-1].message == msg:
            self._entries[-1].count += 1
            return

        entry = _Entry(level=level, message=msg)
        self._entries.append(entry)
        if len(self._entries) > self._max_entries:
            self._entries = self._entries[-self._max_entries :]
        if self._echo:
            print(self._format(entry), file=self._stream)
