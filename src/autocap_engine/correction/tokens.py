"""Hand-written scanners over a single line of text."""

from __future__ import annotations

import unicodedata
from typing import Iterator, Optional

SENTENCE_TERMINATORS = frozenset(".!?")
BULLET_MARKERS = ("- ", "* ")
_OPENERS = "\"'([{"


def is_word_char(ch: str) -> bool:
    """Letters, combining marks, and apostrophes make up a word."""

    return ch == "'" or unicodedata.category(ch)[0] in ("L", "M")


def _is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def last_word_span(text: str) -> Optional[tuple[int, int]]:
    """Locate the last word, ignoring trailing punctuation and whitespace.

    Returns ``None`` when the text ends in something word-like that is not a
    word, e.g. ``"v2 "`` or ``"snake_case"``.
    """

    end = len(text)
    while end > 0 and not is_word_char(text[end - 1]):
        if _is_identifier_char(text[end - 1]):
            return None
        end -= 1
    if end == 0:
        return None
    start = end
    while start > 0 and is_word_char(text[start - 1]):
        start -= 1
    return start, end


def word_at(text: str, start: int) -> str:
    end = start
    while end < len(text) and is_word_char(text[end]):
        end += 1
    return text[start:end]


def list_marker_end(line: str) -> Optional[int]:
    """Return the column right after a list marker, or ``None``.

    Accepts ``- ``, ``* `` and ``1. `` style markers after optional
    indentation; whitespace following the marker is consumed.
    """

    indent = len(line) - len(line.lstrip())
    rest = line[indent:]
    if rest.startswith(BULLET_MARKERS):
        pos = indent + 1
    else:
        digits = 0
        while digits < len(rest) and rest[digits].isdigit():
            digits += 1
        if digits == 0 or rest[digits : digits + 1] != ".":
            return None
        if not rest[digits + 1 : digits + 2].isspace():
            return None
        pos = indent + digits + 1
    while pos < len(line) and line[pos].isspace():
        pos += 1
    return pos


def token_before(text: str, index: int) -> str:
    """Whitespace-delimited token ending at ``index`` (exclusive).

    Leading brackets and quotes are dropped so ``"(e.g."`` yields ``"e.g."``.
    """

    start = index
    while start > 0 and not text[start - 1].isspace():
        start -= 1
    return text[start:index].lstrip(_OPENERS)


def sentence_starts(text: str) -> Iterator[tuple[int, int]]:
    """Yield ``(column, terminator_column)`` for each sentence start candidate.

    A candidate is the first non-space character at the start of the line, or
    the first character after a run of whitespace that follows ``.``, ``!``
    or ``?``. ``terminator_column`` is ``-1`` for the line start. Only
    lowercase letters are yielded.
    """

    pos = 0
    while pos < len(text) and text[pos].isspace():
        pos += 1
    if pos < len(text) and text[pos].islower():
        yield pos, -1

    for index, ch in enumerate(text):
        if ch not in SENTENCE_TERMINATORS:
            continue
        pos = index + 1
        if pos >= len(text) or not text[pos].isspace():
            continue
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if pos < len(text) and text[pos].islower():
            yield pos, index
