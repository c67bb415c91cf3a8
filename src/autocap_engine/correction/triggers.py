"""Decides whether a buffer change should start a correction pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from autocap_engine.buffer import LineSource, Position, read_line

TRIGGER_CHARS = frozenset(" .,;:!?{\")]%}")
TERMINATOR_KEYS = frozenset({"Enter", "ENTER", "enter", "return"})


@dataclass(frozen=True, slots=True)
class TriggerEvent:
    """Target of one correction pass.

    ``scan_column`` bounds the text the word and sentence rules look at: the
    whole line after Enter, otherwise everything left of the cursor.
    """

    line: int
    via_terminator: bool
    column: int
    scan_column: int


def is_terminator_key(key: str) -> bool:
    return key in TERMINATOR_KEYS


def detect(
    last_key_was_terminator: bool, cursor: Position, source: LineSource
) -> Optional[TriggerEvent]:
    row, col = cursor
    if last_key_was_terminator and row > 0:
        line = read_line(source, row - 1)
        if not line:
            return None
        return TriggerEvent(
            line=row - 1,
            via_terminator=True,
            column=len(line),
            scan_column=len(line),
        )

    line = read_line(source, row)
    if not line:
        return None
    scan_column = max(0, min(col, len(line)))
    scanned = line[:scan_column]
    if not scanned or scanned[-1] not in TRIGGER_CHARS:
        return None
    return TriggerEvent(
        line=row, via_terminator=False, column=col, scan_column=scan_column
    )
