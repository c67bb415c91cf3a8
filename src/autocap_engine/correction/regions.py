"""Protected-region classification for a single line offset.

Protection is decided from document content alone, in priority order:

1. YAML front-matter (first line is exactly ``---`` until the closing ``---``)
2. an open fenced code block (odd number of ````` ``` ````` lines above)
3. an open fenced math block (odd number of ``$$`` lines above)
4. inline code (odd number of unescaped backticks before the offset)
5. inline math (odd number of unescaped ``$`` before the offset)

The first three only depend on lines above the target line, so they are
scanned once per correction pass into a ``RegionScan`` and reused for every
offset the rules examine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from autocap_engine.buffer import LineSource, read_line

FRONT_MATTER_DELIMITER = "---"
CODE_FENCE = "```"
MATH_FENCE = "$$"


@dataclass(frozen=True, slots=True)
class RegionScan:
    """Block-level verdict for one line, valid for a single pass."""

    line: int
    front_matter: bool = False
    code_fence: bool = False
    math_fence: bool = False

    @property
    def reason(self) -> Optional[str]:
        if self.front_matter:
            return "front_matter"
        if self.code_fence:
            return "code_fence"
        if self.math_fence:
            return "math_fence"
        return None

    def is_protected(self, text: str, offset: int) -> bool:
        return protection_reason(self, text, offset) is not None


def _front_matter_open(source: LineSource, line_index: int) -> bool:
    if read_line(source, 0).strip() != FRONT_MATTER_DELIMITER:
        return False
    for index in range(1, line_index):
        if read_line(source, index).strip() == FRONT_MATTER_DELIMITER:
            return False
    return True


def scan_regions(source: LineSource, line_index: int) -> RegionScan:
    code_fences = 0
    math_fences = 0
    for index in range(min(line_index, source.line_count)):
        stripped = read_line(source, index).strip()
        if stripped.startswith(CODE_FENCE):
            code_fences += 1
        elif stripped.startswith(MATH_FENCE):
            math_fences += 1
    return RegionScan(
        line=line_index,
        front_matter=_front_matter_open(source, line_index),
        code_fence=code_fences % 2 == 1,
        math_fence=math_fences % 2 == 1,
    )


def count_unescaped(text: str, marker: str, offset: int) -> int:
    """Count ``marker`` before ``offset`` that are not preceded by ``\\``."""

    count = 0
    for index in range(min(offset, len(text))):
        if text[index] == marker and (index == 0 or text[index - 1] != "\\"):
            count += 1
    return count


def protection_reason(scan: RegionScan, text: str, offset: int) -> Optional[str]:
    """Name the region protecting ``offset`` in ``text``, if any."""

    block = scan.reason
    if block is not None:
        return block
    if count_unescaped(text, "`", offset) % 2 == 1:
        return "inline_code"
    if count_unescaped(text, "$", offset) % 2 == 1:
        return "inline_math"
    return None


def is_protected(source: LineSource, line_index: int, offset: int) -> bool:
    """One-off classification; passes should reuse a ``RegionScan`` instead."""

    scan = scan_regions(source, line_index)
    return scan.is_protected(read_line(source, line_index), offset)
