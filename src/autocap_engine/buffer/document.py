"""Line storage for the reference buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class BufferDocument:
    """Versioned list-of-lines text model.

    Documents are treated as values: edits produce a new document with a
    bumped ``version`` instead of mutating the line list in place.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "BufferDocument":
        lines = text.split("\n")
        return cls(_lines=lines, version=version)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def offset_of(self, row: int, col: int) -> int:
        offset = 0
        for i in range(row):
            offset += len(self._lines[i]) + 1  # newline
        return offset + col

    def position_of(self, offset: int) -> tuple[int, int]:
        running = 0
        for row, line in enumerate(self._lines):
            if offset <= running + len(line):
                return (row, offset - running)
            running += len(line) + 1
        return (len(self._lines) - 1, len(self._lines[-1]))
