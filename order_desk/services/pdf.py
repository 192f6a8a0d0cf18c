"""PDF document and text rendering built on top of fpdf2 for bilingual (EN/AR) output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from fpdf import FPDF

from order_desk.services import fonts
from order_desk.services.script import (
    Direction,
    adjust_for_direction,
    sanitize_text,
    shape_for_display,
    text_direction,
)

logger = logging.getLogger(__name__)

DEFAULT_FAMILY = "helvetica"
TEXT_COLOR = (30, 41, 59)
LINE_HEIGHT_RATIO = 0.35
ELLIPSIS = "..."

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class DrawOp:
    """One drawing call issued on a page."""

    kind: str  # text | line | rect | image
    page: int
    x: float
    y: float
    w: float = 0.0
    h: float = 0.0
    text: str = ""
    family: str = ""
    style: str = ""
    size: float = 0.0
    align: str = ""
    color: RGB | None = None


class OrderPDF(FPDF):
    """fpdf2 document that keeps a log of every drawing operation it issues."""

    def __init__(self, orientation: str = "P") -> None:
        super().__init__(orientation=orientation, unit="mm", format="A4")
        self.set_auto_page_break(auto=False)
        self.operations: list[DrawOp] = []
        self.arabic_family: str | None = None
        self._ensure_fonts()
        self.set_font(DEFAULT_FAMILY, "", 10)

    def _ensure_fonts(self) -> None:
        asset = fonts.get_primary_font()
        if asset is None:
            return
        try:
            path = fonts.materialize(asset)
            # Only a regular program is shipped; it doubles as the bold face.
            self.add_font(asset.name, "", str(path))
            self.add_font(asset.name, "B", str(path))
        except Exception as exc:
            logger.warning("Arabic font %s could not be registered: %s", asset.name, exc)
            return
        self.arabic_family = asset.name

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        align: str = "left",
        color: RGB = TEXT_COLOR,
        drawn: str | None = None,
    ) -> None:
        """Write one line anchored at ``x`` (start, center or end) on baseline ``y``."""
        shown = text if drawn is None else drawn
        width = self.get_string_width(shown)
        if align == "center":
            left = x - width / 2
        elif align == "right":
            left = x - width
        else:
            left = x
        self.set_text_color(*color)
        self.text(left, y, shown)
        self.operations.append(
            DrawOp(
                "text",
                self.page,
                x,
                y,
                w=width,
                text=text,
                family=self.font_family,
                style=self.font_style,
                size=self.font_size_pt,
                align=align,
                color=tuple(color),
            )
        )

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, *, color: RGB, width: float = 0.2) -> None:
        self.set_draw_color(*color)
        self.set_line_width(width)
        self.line(x1, y1, x2, y2)
        self.operations.append(DrawOp("line", self.page, x1, y1, w=x2 - x1, h=y2 - y1, color=tuple(color)))

    def fill_rect(self, x: float, y: float, w: float, h: float, *, color: RGB) -> None:
        self.set_fill_color(*color)
        self.rect(x, y, w, h, style="F")
        self.operations.append(DrawOp("rect", self.page, x, y, w=w, h=h, color=tuple(color)))

    def draw_image(self, image: Any, x: float, y: float, w: float, h: float) -> None:
        self.image(image, x=x, y=y, w=w, h=h)
        self.operations.append(DrawOp("image", self.page, x, y, w=w, h=h))

    def texts(self, page: int | None = None) -> list[str]:
        """Text of every text operation, optionally limited to one page."""
        return [
            op.text
            for op in self.operations
            if op.kind == "text" and (page is None or op.page == page)
        ]

    def render(self) -> bytes:
        """Render the PDF and return it as bytes."""
        data = self.output()
        return data if isinstance(data, bytes) else bytes(data)


@dataclass(frozen=True)
class RenderStyle:
    align: str = "center"  # left | center | right
    max_width: float | None = None
    font_size: float = 10
    font_style: str = "normal"  # normal | bold
    color: RGB = field(default=TEXT_COLOR)

    @property
    def weight(self) -> str:
        return "B" if self.font_style == "bold" else ""


@dataclass(frozen=True)
class FontAttempt:
    family: str
    style: str
    aligned: bool = True
    shaped: bool = False
    latin_safe: bool = False


@dataclass(frozen=True)
class DrawResult:
    attempt: FontAttempt
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def fallback_chain(pdf: OrderPDF, arabic: bool, weight: str) -> tuple[FontAttempt, ...]:
    """Ordered font attempts: embedded font, default font, then plain default font."""
    attempts: list[FontAttempt] = []
    if arabic and pdf.arabic_family:
        attempts.append(FontAttempt(pdf.arabic_family, weight, shaped=True))
    attempts.append(FontAttempt(DEFAULT_FAMILY, weight))
    attempts.append(FontAttempt(DEFAULT_FAMILY, "", aligned=False, latin_safe=True))
    return tuple(attempts)


def _longest_prefix(pdf: FPDF, word: str, max_width: float) -> int:
    cut = 1
    while cut < len(word) and pdf.get_string_width(word[: cut + 1]) <= max_width:
        cut += 1
    return cut


def wrap_text(pdf: FPDF, text: str, max_width: float) -> list[str]:
    """Greedy word wrap using the active font metrics; long words are split."""
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if pdf.get_string_width(candidate) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        while len(word) > 1 and pdf.get_string_width(word) > max_width:
            cut = _longest_prefix(pdf, word, max_width)
            lines.append(word[:cut])
            word = word[cut:]
        current = word
    if current:
        lines.append(current)
    return lines or [""]


def fit_to_width(pdf: FPDF, text: str, max_width: float) -> str:
    """Keep the first wrapped line; mark the cut with an ellipsis."""
    lines = wrap_text(pdf, text, max_width)
    if len(lines) > 1:
        return lines[0] + ELLIPSIS
    return lines[0]


def _try_draw(
    pdf: OrderPDF,
    text: str,
    x: float,
    y: float,
    style: RenderStyle,
    align: str,
    attempt: FontAttempt,
) -> DrawResult:
    try:
        pdf.set_font(attempt.family, attempt.style, style.font_size)
        line = text.encode("latin-1", "replace").decode("latin-1") if attempt.latin_safe else text
        if style.max_width:
            line = fit_to_width(pdf, line, style.max_width)
        drawn = shape_for_display(line) if attempt.shaped else None
        pdf.draw_text(
            line,
            x,
            y,
            align=align if attempt.aligned else "left",
            color=style.color,
            drawn=drawn,
        )
    except Exception as exc:
        return DrawResult(attempt, exc)
    return DrawResult(attempt)


def render_text(
    pdf: OrderPDF,
    text: str | None,
    x: float,
    y: float,
    style: RenderStyle = RenderStyle(),
) -> float:
    """
    Write a single line of text and return the vertical space it consumed.

    The text is classified by script first. Arabic text gets the embedded
    font (when one is registered) and mirrored left/right alignment; the x
    coordinate itself is left as given. Font and draw failures walk down
    the fallback chain and never propagate.
    """
    direction = text_direction(text)
    align = adjust_for_direction(style.align, direction)
    line_height = style.font_size * LINE_HEIGHT_RATIO
    clean = sanitize_text(text)
    if not clean:
        return line_height

    chain = fallback_chain(pdf, direction is Direction.RTL, style.weight)
    for index, attempt in enumerate(chain):
        result = _try_draw(pdf, clean, x, y, style, align, attempt)
        if result.ok:
            if attempt.latin_safe:
                logger.warning("Rendered %r with the plain %s fallback", clean, attempt.family)
            return line_height
        logger.debug(
            "Draw attempt %d (%s %s) failed for %r: %s",
            index + 1,
            attempt.family,
            attempt.style or "regular",
            clean,
            result.error,
        )
    logger.warning("Skipping text %r: every font attempt failed", clean)
    return line_height
