"""Host buffer protocol and the in-memory reference buffer."""

from .buffer import Buffer, BufferDelta, ChangeListener
from .document import BufferDocument
from .state import BufferState, Position
from .sync import BufferMirror, BufferValidationError, HostBuffer, LineSource
from .validation import ensure_position, read_line

__all__ = [
    "Buffer",
    "BufferDelta",
    "BufferDocument",
    "BufferMirror",
    "BufferState",
    "BufferValidationError",
    "ChangeListener",
    "HostBuffer",
    "LineSource",
    "Position",
    "ensure_position",
    "read_line",
]
