"""Boundary types shared between the correction core and host editors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .state import Position


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: Position


class LineSource(Protocol):
    """Read-only line access, all the region classifier needs."""

    @property
    def line_count(self) -> int: ...

    def get_line(self, index: int) -> str: ...


class HostBuffer(LineSource, Protocol):
    """Editor surface the correction controller drives.

    Hosts must deliver a change notification for every ``replace_range``
    call, including the ones the controller issues itself.
    """

    def get_cursor(self) -> Position: ...

    def replace_range(self, text: str, start: Position, end: Position) -> object: ...


class BufferValidationError(RuntimeError):
    """Raised when a caller provides an out-of-bounds position."""

    def __init__(self, message: str, *, position: Position | None = None) -> None:
        super().__init__(message)
        self.position = position
