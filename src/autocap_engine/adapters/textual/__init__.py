"""Textual host adapter; the demo app lives in ``.app`` and needs textual."""

from .controller import TextualCorrectionAdapter, TextualUIHooks, type_text

__all__ = ["TextualCorrectionAdapter", "TextualUIHooks", "type_text"]
