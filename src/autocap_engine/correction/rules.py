"""Correction rules run, in order, by the pipeline controller.

Every rule re-reads the line through its ``LineSession`` before each
decision, because a rule earlier in the pass may already have edited it.
All edits replace exactly one character with exactly one character, so
columns computed before an edit stay valid after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from autocap_engine.settings import CorrectionConfig

from .regions import RegionScan
from .tokens import (
    last_word_span,
    list_marker_end,
    sentence_starts,
    token_before,
    word_at,
)


@dataclass(frozen=True, slots=True)
class Edit:
    """Single-character, length-preserving replacement."""

    line: int
    column: int
    before: str
    after: str
    rule: str


class LineSession(Protocol):
    """Pass-scoped view of the target line handed to each rule."""

    line: int
    scan: RegionScan
    scan_column: int

    @property
    def text(self) -> str: ...

    def is_protected(self, offset: int) -> bool: ...

    def apply(self, edit: Edit) -> bool: ...


def has_double_capital(word: str) -> bool:
    """``HAllo`` style: two leading capitals followed by a lowercase letter."""

    return (
        len(word) >= 3
        and word[0].isupper()
        and word[1].isupper()
        and word[2].islower()
    )


def _recase(line: int, column: int, ch: str, target: str, rule: str) -> Optional[Edit]:
    if len(target) != 1 or target == ch:
        return None
    return Edit(line=line, column=column, before=ch, after=target, rule=rule)


def lowercase_at(line: int, column: int, ch: str, rule: str) -> Optional[Edit]:
    return _recase(line, column, ch, ch.lower(), rule)


def uppercase_at(line: int, column: int, ch: str, rule: str) -> Optional[Edit]:
    return _recase(line, column, ch, ch.upper(), rule)


class CorrectionRule:
    """Base class for the pipeline's rules."""

    name: str = "rule"

    def is_enabled(self, config: CorrectionConfig) -> bool:
        del config
        return True

    def apply(
        self, session: LineSession, config: CorrectionConfig
    ) -> List[Edit]:  # pragma: no cover - abstract override
        raise NotImplementedError

    @staticmethod
    def _commit(session: LineSession, edit: Optional[Edit], edits: List[Edit]) -> None:
        if edit is not None and session.apply(edit):
            edits.append(edit)


class ListItemRule(CorrectionRule):
    """Capitalizes the first word after a ``-``, ``*`` or ``1.`` marker."""

    name = "list_item"

    def is_enabled(self, config: CorrectionConfig) -> bool:
        return config.capitalize_list_items

    def _first_word(
        self, session: LineSession, config: CorrectionConfig
    ) -> Optional[tuple[int, str]]:
        text = session.text
        start = list_marker_end(text)
        if start is None:
            return None
        word = word_at(text, start)
        if not word or not word[0].isalpha() or config.is_excluded(word):
            return None
        return start, word

    def apply(self, session: LineSession, config: CorrectionConfig) -> List[Edit]:
        edits: List[Edit] = []

        found = self._first_word(session, config)
        if found is None:
            return edits
        start, word = found
        if has_double_capital(word) and not session.is_protected(start):
            edit = lowercase_at(session.line, start + 1, word[1], self.name)
            self._commit(session, edit, edits)

        found = self._first_word(session, config)
        if found is None:
            return edits
        start, word = found
        if not word[0].isupper() and not session.is_protected(start):
            edit = uppercase_at(session.line, start, word[0], self.name)
            self._commit(session, edit, edits)
        return edits


class WordRule(CorrectionRule):
    """Repairs ``HAllo`` into ``Hallo`` for the word just completed."""

    name = "word"

    def apply(self, session: LineSession, config: CorrectionConfig) -> List[Edit]:
        edits: List[Edit] = []
        text = session.text[: session.scan_column]
        span = last_word_span(text)
        if span is None:
            return edits
        start, end = span
        word = text[start:end]
        if config.is_excluded(word) or not has_double_capital(word):
            return edits
        if session.is_protected(start + 1):
            return edits
        edit = lowercase_at(session.line, start + 1, word[1], self.name)
        self._commit(session, edit, edits)
        return edits


class SentenceStartRule(CorrectionRule):
    """Uppercases the first letter of each sentence on the line."""

    name = "sentence_start"

    def is_enabled(self, config: CorrectionConfig) -> bool:
        return config.capitalize_sentences

    def apply(self, session: LineSession, config: CorrectionConfig) -> List[Edit]:
        edits: List[Edit] = []
        candidates = list(sentence_starts(session.text[: session.scan_column]))
        for column, terminator in candidates:
            text = session.text
            if column >= len(text):
                break
            if terminator >= 0 and config.is_abbreviation(
                token_before(text, terminator + 1)
            ):
                continue
            ch = text[column]
            if not ch.isalpha() or not ch.islower():
                continue
            if config.is_excluded(word_at(text, column)):
                continue
            if session.is_protected(column):
                continue
            edit = uppercase_at(session.line, column, ch, self.name)
            self._commit(session, edit, edits)
        return edits


def default_rules() -> Sequence[CorrectionRule]:
    """List-item, then word, then sentence-start."""

    return (ListItemRule(), WordRule(), SentenceStartRule())
