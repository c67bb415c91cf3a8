"""In-memory host buffer with synchronous change notifications."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable, ContextManager, List, Optional

from autocap_engine.runtime import telemetry

from .document import BufferDocument
from .state import BufferState, Position
from .sync import BufferMirror
from .validation import ensure_position


@dataclass(slots=True)
class BufferDelta:
    version: int
    start: Position
    end: Position
    text: str
    cursor: Position
    label: str


ChangeListener = Callable[[BufferDelta], None]


class Buffer:
    """Reference implementation of the ``HostBuffer`` protocol.

    Listeners run synchronously after every mutation, so a listener that
    edits the buffer re-enters ``replace_range`` and receives its own echo
    before the outer call returns.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self._listeners: List[ChangeListener] = []

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text))

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def line_count(self) -> int:
        return self.document.line_count

    def get_line(self, index: int) -> str:
        return self.document.get_line(index)

    def get_cursor(self) -> Position:
        return self.state.cursor

    def set_cursor(self, row: int, col: int) -> Position:
        ensure_position(self.document, (row, col))
        self.state.set_cursor(row, col)
        return self.state.cursor

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def mirror(self) -> BufferMirror:
        return BufferMirror(
            text=self.document.text,
            cursor=self.state.cursor,
        )

    def replace_range(
        self, text: str, start: Position, end: Position, *, label: str = "replace_range"
    ) -> BufferDelta:
        start = ensure_position(self.document, start)
        end = ensure_position(self.document, end)
        if start > end:
            start, end = end, start

        with Transaction(self, label):
            before = self.document.text
            start_offset = self.document.offset_of(*start)
            end_offset = self.document.offset_of(*end)
            cursor_offset = self.document.offset_of(*self.state.cursor)

            self.document = BufferDocument.from_text(
                before[:start_offset] + text + before[end_offset:],
                version=self.document.version + 1,
            )
            if cursor_offset >= end_offset:
                cursor_offset += len(text) - (end_offset - start_offset)
            elif cursor_offset > start_offset:
                cursor_offset = start_offset + len(text)
            self.state.set_cursor(*self.document.position_of(cursor_offset))

        delta = BufferDelta(
            version=self.document.version,
            start=start,
            end=end,
            text=text,
            cursor=self.state.cursor,
            label=label,
        )
        for listener in list(self._listeners):
            listener(delta)
        return delta

    def insert_text(
        self, text: str, *, position: Optional[Position] = None
    ) -> BufferDelta:
        at = position or self.state.cursor
        return self.replace_range(text, at, at, label="insert_text")

    def delete_range(self, start: Position, end: Position) -> BufferDelta:
        return self.replace_range("", start, end, label="delete_range")


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps a single document mutation in a telemetry span."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
