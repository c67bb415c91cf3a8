"""Settings dataclasses and field-by-field defaulting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

DEFAULT_ABBREVIATIONS: tuple[str, ...] = (
    "e.g.",
    "i.e.",
    "etc.",
    "vs.",
    "z.B.",
    "d.h.",
    "bzw.",
    "usw.",
)

_TERMINATORS = ".!?"


def parse_word_list(value: str) -> tuple[str, ...]:
    """Split a comma separated settings field, dropping blanks."""

    return tuple(part.strip() for part in value.split(",") if part.strip())


def _coerce_words(raw: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if isinstance(raw, str):
        return parse_word_list(raw)
    if isinstance(raw, (list, tuple)):
        return tuple(
            item.strip() for item in raw if isinstance(item, str) and item.strip()
        )
    return default


_STORED_KEYS = {
    "exclusion_list": "exclusionList",
    "abbreviations": "abbreviations",
    "capitalize_list_items": "capitalizeListItem",
    "capitalize_sentences": "capitalizeSentences",
}


def _coerce_flag(raw: Any) -> bool:
    return raw if isinstance(raw, bool) else False


def normalize_abbreviation(value: str) -> str:
    """Case-fold ``value`` and drop trailing sentence terminators."""

    return value.strip().casefold().rstrip(_TERMINATORS)


@dataclass(frozen=True, slots=True)
class CorrectionSettings:
    """User-facing settings exactly as they are persisted."""

    exclusion_list: tuple[str, ...] = ()
    abbreviations: tuple[str, ...] = DEFAULT_ABBREVIATIONS
    capitalize_list_items: bool = False
    capitalize_sentences: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "CorrectionSettings":
        """Build settings from stored data, defaulting each bad field on its own."""

        if not isinstance(data, Mapping):
            return cls()
        return cls(
            exclusion_list=_coerce_words(data.get("exclusionList"), ()),
            abbreviations=_coerce_words(
                data.get("abbreviations"), DEFAULT_ABBREVIATIONS
            ),
            capitalize_list_items=_coerce_flag(data.get("capitalizeListItem")),
            capitalize_sentences=_coerce_flag(data.get("capitalizeSentences")),
        )

    def with_changes(self, **changes: Any) -> "CorrectionSettings":
        """Return a copy with ``changes`` coerced like stored data."""

        data = self.to_mapping()
        for name, value in changes.items():
            if name not in _STORED_KEYS:
                raise TypeError(f"Unknown settings field '{name}'")
            data[_STORED_KEYS[name]] = value
        return self.from_mapping(data)

    def to_mapping(self) -> dict[str, Any]:
        return {
            "exclusionList": list(self.exclusion_list),
            "abbreviations": list(self.abbreviations),
            "capitalizeListItem": self.capitalize_list_items,
            "capitalizeSentences": self.capitalize_sentences,
        }


def _fold(words: Iterable[str]) -> frozenset[str]:
    return frozenset(word.casefold() for word in words)


@dataclass(frozen=True, slots=True)
class CorrectionConfig:
    """Case-insensitive lookup sets derived once per settings change."""

    exclusions: frozenset[str] = field(default_factory=frozenset)
    abbreviations: frozenset[str] = field(default_factory=frozenset)
    capitalize_list_items: bool = False
    capitalize_sentences: bool = False

    @classmethod
    def from_settings(cls, settings: CorrectionSettings) -> "CorrectionConfig":
        return cls(
            exclusions=_fold(settings.exclusion_list),
            abbreviations=frozenset(
                normalize_abbreviation(abbr)
                for abbr in settings.abbreviations
                if normalize_abbreviation(abbr)
            ),
            capitalize_list_items=settings.capitalize_list_items,
            capitalize_sentences=settings.capitalize_sentences,
        )

    def is_excluded(self, word: str) -> bool:
        return word.casefold() in self.exclusions

    def is_abbreviation(self, token: str) -> bool:
        return normalize_abbreviation(token) in self.abbreviations
