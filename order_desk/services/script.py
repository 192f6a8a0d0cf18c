"""
Script detection helpers for bilingual (EN/AR) PDF output.

Every string written to a document is classified here first so the renderer
can pick a font and a text direction for it.
"""

from __future__ import annotations

import re
from enum import Enum

import arabic_reshaper
from bidi.algorithm import get_display

# Arabic block, Supplement, Extended-A and both presentation-form blocks.
_ARABIC_RE = re.compile(
    r"[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFF]"
)

# Anything outside printable ASCII and the base Arabic block.
_UNSUPPORTED_RE = re.compile(r"[^\x20-\x7E\u0600-\u06FF]")


class Direction(str, Enum):
    LTR = "ltr"
    RTL = "rtl"


def contains_arabic_script(text: str | None) -> bool:
    """
    Return True if the text contains at least one Arabic code point.

    Classification is by presence, not majority: ``"Order 12 - شاورما"`` is
    Arabic even though most of its characters are Latin.

    Args:
        text: Any string, or None.

    Returns:
        True when an Arabic code point is present, False otherwise.
    """
    if not text:
        return False
    return bool(_ARABIC_RE.search(text))


def text_direction(text: str | None) -> Direction:
    """Return RTL for Arabic-containing text, LTR for everything else."""
    return Direction.RTL if contains_arabic_script(text) else Direction.LTR


def adjust_for_direction(align: str, direction: Direction) -> str:
    """Swap left/right alignment for right-to-left text; center is unchanged."""
    if direction is not Direction.RTL:
        return align
    if align == "left":
        return "right"
    if align == "right":
        return "left"
    return align


def sanitize_text(text: str | None) -> str:
    """Replace glyphs outside printable ASCII and the Arabic block with spaces."""
    if not text:
        return ""
    return _UNSUPPORTED_RE.sub(" ", text).strip()


def shape_for_display(text: str) -> str:
    """Join Arabic letters and reorder the line into visual order."""
    if not contains_arabic_script(text):
        return text
    return get_display(arabic_reshaper.reshape(text))
