"""Validation helpers shared across buffer services."""

from __future__ import annotations

from .document import BufferDocument
from .state import Position
from .sync import BufferValidationError, LineSource


def ensure_position(document: BufferDocument, position: Position) -> Position:
    row, col = position
    if row < 0 or row >= document.line_count:
        raise BufferValidationError("Row out of range", position=position)
    line = document.get_line(row)
    if col < 0 or col > len(line):
        raise BufferValidationError("Column out of range", position=position)
    return position


def read_line(source: LineSource, index: int) -> str:
    """Return line ``index`` or ``""`` when it does not exist."""

    if index < 0 or index >= source.line_count:
        return ""
    return source.get_line(index) or ""
