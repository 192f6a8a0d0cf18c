"""Money helpers for decimal-as-text order amounts (OMR)."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CURRENCY_LABEL = "OMR"

_AMOUNT_RE = re.compile(r"^\s*-?[0-9]+(?:\.[0-9]+)?\s*$")


def parse_amount(txt: str | None) -> Decimal:
    """Parse an amount string; anything unparsable counts as zero."""
    txt = (txt or "").strip().replace(",", "")
    if not txt or not _AMOUNT_RE.match(txt):
        return Decimal("0")
    try:
        return Decimal(txt)
    except InvalidOperation:
        return Decimal("0")


def is_positive(txt: str | None) -> bool:
    return parse_amount(txt) > 0


def money(txt: str | None, default: str = "0.000") -> str:
    """Display an amount verbatim behind the currency label."""
    return f"{CURRENCY_LABEL} {txt or default}"


def money_total(value: Decimal, places: int = 2) -> str:
    quantum = Decimal(1).scaleb(-places)
    return str(value.quantize(quantum, rounding=ROUND_HALF_UP))
