"""Cursor state tracked alongside a document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Position = Tuple[int, int]  # (line, column)


@dataclass(slots=True)
class BufferState:
    cursor: Position = (0, 0)

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)
