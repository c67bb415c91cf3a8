"""Trigger detection, protected regions, rules, and the pipeline controller."""

from .controller import CorrectionController, PassReport, PassState, PendingEcho
from .regions import RegionScan, is_protected, protection_reason, scan_regions
from .rules import (
    CorrectionRule,
    Edit,
    ListItemRule,
    SentenceStartRule,
    WordRule,
    default_rules,
    has_double_capital,
)
from .triggers import TRIGGER_CHARS, TriggerEvent, detect

__all__ = [
    "CorrectionController",
    "CorrectionRule",
    "Edit",
    "ListItemRule",
    "PassReport",
    "PassState",
    "PendingEcho",
    "RegionScan",
    "SentenceStartRule",
    "TRIGGER_CHARS",
    "TriggerEvent",
    "WordRule",
    "default_rules",
    "detect",
    "has_double_capital",
    "is_protected",
    "protection_reason",
    "scan_regions",
]
