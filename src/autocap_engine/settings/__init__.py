"""Persisted correction settings and the lookup config derived from them."""

from .models import (
    DEFAULT_ABBREVIATIONS,
    CorrectionConfig,
    CorrectionSettings,
    parse_word_list,
)
from .store import SettingsListener, SettingsStore

__all__ = [
    "DEFAULT_ABBREVIATIONS",
    "CorrectionConfig",
    "CorrectionSettings",
    "SettingsListener",
    "SettingsStore",
    "parse_word_list",
]
