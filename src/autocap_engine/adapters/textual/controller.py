"""Adapter wiring key events, the buffer, and the correction controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from autocap_engine.buffer import Buffer, BufferDelta, BufferMirror
from autocap_engine.correction import CorrectionController, PassReport


_MOTIONS: Dict[str, tuple[int, int]] = {
    "LEFT": (0, -1),
    "RIGHT": (0, 1),
    "UP": (-1, 0),
    "DOWN": (1, 0),
}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualCorrectionAdapter:
    """Plays the host editor: turns keys into buffer edits and notifications.

    Every key is reported through ``on_keydown`` before the buffer is
    mutated, mirroring how an editor delivers keydown ahead of the change
    event.
    """

    def __init__(
        self,
        buffer: Buffer,
        controller: CorrectionController,
        hooks: TextualUIHooks,
    ) -> None:
        self.buffer = buffer
        self.controller = controller
        self.hooks = hooks
        self.last_report: Optional[PassReport] = None
        self._unsubscribe = buffer.on_change(self._on_buffer_change)
        self._refresh_buffer()

    def close(self) -> None:
        self._unsubscribe()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> Optional[PassReport]:
        """Apply one key press and return the resulting correction report."""

        normalized_modifiers = tuple(str(mod).upper() for mod in modifiers)
        self._log_state(
            "key ->", key=key, text=text, mods=normalized_modifiers or None
        )
        if "CTRL" in normalized_modifiers or "ALT" in normalized_modifiers:
            return None

        self.last_report = None
        self.controller.on_keydown(key)
        motion = _MOTIONS.get(key)
        if motion is not None:
            self._move(*motion)
        elif key in {"ENTER", "Enter"}:
            self.buffer.insert_text("\n")
        elif key == "BACKSPACE":
            self._backspace()
        elif text:
            self.buffer.insert_text(text)
        else:
            return None
        self._refresh_buffer()
        return self.last_report

    def _on_buffer_change(self, delta: BufferDelta) -> None:
        report = self.controller.on_change(delta)
        if report.status == "suppressed":
            return
        self.last_report = report
        self._log_state("change <-", label=delta.label, status=report.status)
        for edit in report.edits:
            self.hooks.update_status(
                f"{edit.rule}: {edit.before!r} -> {edit.after!r}"
                f" @ {edit.line}:{edit.column}"
            )

    def _backspace(self) -> None:
        row, col = self.buffer.get_cursor()
        if col > 0:
            self.buffer.delete_range((row, col - 1), (row, col))
        elif row > 0:
            prev = len(self.buffer.get_line(row - 1))
            self.buffer.delete_range((row - 1, prev), (row, 0))

    def _move(self, d_row: int, d_col: int) -> None:
        row, col = self.buffer.get_cursor()
        if d_row:
            row = max(0, min(row + d_row, self.buffer.line_count - 1))
            col = min(col, len(self.buffer.get_line(row)))
        else:
            col = max(0, min(col + d_col, len(self.buffer.get_line(row))))
        self.buffer.set_cursor(row, col)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.buffer.mirror())

    def _log_state(self, prefix: str, **fields: object) -> None:
        parts = [prefix, f"cursor={self.buffer.get_cursor()!r}"]
        parts.extend(
            f"{key}={value!r}" for key, value in fields.items() if value is not None
        )
        self.hooks.log(" ".join(parts))


def type_text(adapter: TextualCorrectionAdapter, text: str) -> str:
    """Replay ``text`` one keystroke at a time; newlines press ENTER."""

    for ch in text:
        if ch == "\n":
            adapter.handle_textual_key("ENTER")
        else:
            adapter.handle_textual_key(ch, text=ch)
    return adapter.buffer.text


__all__ = ["TextualCorrectionAdapter", "TextualUIHooks", "type_text"]
