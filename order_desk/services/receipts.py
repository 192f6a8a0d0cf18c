"""Single-order receipt PDF (portrait A4)."""

from __future__ import annotations

import io
import logging
from dataclasses import replace
from pathlib import Path
from typing import Union

from PIL import Image

from order_desk.services.orders import NOT_AVAILABLE, OrderRecord
from order_desk.services.payments import is_positive, money
from order_desk.services.pdf import ELLIPSIS, OrderPDF, RenderStyle, render_text, wrap_text
from order_desk.services.script import contains_arabic_script, sanitize_text

logger = logging.getLogger(__name__)

HeaderSource = Union[str, Path, bytes, Image.Image, None]

MARGIN = 15
HEADER_IMAGE_HEIGHT = 35
PARAGRAPH_LINE = 6
FOOTER_CLEARANCE = 35
# Height below the last details line taken by the delivery and payment sections.
TRAILING_SECTIONS = 80

PRIMARY = (37, 99, 235)
BAND_BG = (248, 250, 252)
RULE = (200, 200, 200)
MUTED = (100, 100, 100)

BODY = RenderStyle(align="left", font_size=12, color=(0, 0, 0))
SECTION = replace(BODY, font_size=14, font_style="bold", color=PRIMARY)


def load_header_image(source: HeaderSource) -> Image.Image:
    """Load and decode the branding image in a single attempt."""
    if source is None:
        raise FileNotFoundError("no receipt header image configured")
    if isinstance(source, Image.Image):
        return source
    if isinstance(source, bytes):
        image = Image.open(io.BytesIO(source))
    else:
        image = Image.open(Path(source))
    image.load()
    return image


class ReceiptLayout:
    def __init__(self, record: OrderRecord, header_image: HeaderSource = None) -> None:
        self.record = record
        self.header_image = header_image
        self.pdf = OrderPDF(orientation="P")
        self.pdf.add_page()
        self.y: float = MARGIN

    @property
    def page_width(self) -> float:
        return self.pdf.w

    @property
    def left_x(self) -> float:
        return MARGIN

    @property
    def right_x(self) -> float:
        return self.page_width / 2

    def text(self, value: str, x: float, style: RenderStyle = BODY) -> None:
        render_text(self.pdf, value, x, self.y, style)

    def build(self) -> OrderPDF:
        self.add_branding()
        self.add_receipt_band()
        self.add_customer()
        self.add_order_details()
        self.add_delivery()
        self.add_payment()
        self.add_footer()
        return self.pdf

    def add_branding(self) -> None:
        width = self.page_width - 2 * MARGIN
        try:
            image = load_header_image(self.header_image)
            self.pdf.draw_image(image, MARGIN, self.y, width, HEADER_IMAGE_HEIGHT)
        except Exception as exc:
            logger.warning("Receipt header image unavailable, using text title: %s", exc)
            self.text(
                "RECEIPT",
                self.page_width / 2,
                RenderStyle(align="center", font_size=20, font_style="bold", color=(0, 0, 0)),
            )
            self.y += 15
            return
        self.y += HEADER_IMAGE_HEIGHT + 15

    def add_receipt_band(self) -> None:
        record = self.record
        self.pdf.fill_rect(MARGIN, self.y - 5, self.page_width - 2 * MARGIN, 25, color=BAND_BG)
        self.text(
            f"Receipt No: {record.reference or NOT_AVAILABLE}",
            self.left_x,
            replace(BODY, font_style="bold"),
        )
        self.text(f"Date: {record.display('date')}", self.right_x)
        self.y += 8
        self.text(f"Time: {record.display('time')}", self.right_x)
        self.y += 15

    def add_customer(self) -> None:
        record = self.record
        self.text("Customer Information:", MARGIN, SECTION)
        self.y += 10
        self.text(f"Name: {record.display('name')}", self.left_x)
        self.text(f"Phone: {record.display('phone_number')}", self.right_x)
        self.y += 8
        if record.address:
            self.text(f"Address: {record.address}", self.left_x)
            self.y += 8
        if record.location:
            self.text(f"Location: {record.location}", self.right_x)
            self.y += 8
        self.y += 12

    def add_order_details(self) -> None:
        self.text("Order Details:", MARGIN, SECTION)
        self.y += 10
        # Receipts show the whole text, wrapped to the page, as far as the
        # payment section still fits above the footer.
        details = sanitize_text(self.record.display("order_details"))
        width = self.page_width - 2 * MARGIN
        lines = self._wrap(details, width)
        capacity = int((self.details_limit - self.y) // PARAGRAPH_LINE) + 1
        if len(lines) > capacity:
            lines = lines[: max(capacity, 1)]
            lines[-1] = self._with_ellipsis(lines[-1], width)
        for index, line in enumerate(lines):
            if index:
                self.y += PARAGRAPH_LINE
            self.text(line, MARGIN)
        self.y += 15

    @property
    def footer_top(self) -> float:
        return self.pdf.h - MARGIN - FOOTER_CLEARANCE

    @property
    def details_limit(self) -> float:
        """Lowest baseline an order details line may use."""
        return self.footer_top - TRAILING_SECTIONS

    def _with_ellipsis(self, line: str, width: float) -> str:
        try:
            while line and self.pdf.get_string_width(line + ELLIPSIS) > width:
                line = line[:-1]
        except Exception as exc:
            logger.debug("Measuring the cut details line failed: %s", exc)
        return line.rstrip() + ELLIPSIS

    def _wrap(self, text: str, width: float) -> list[str]:
        family = "helvetica"
        if contains_arabic_script(text) and self.pdf.arabic_family:
            family = self.pdf.arabic_family
        try:
            self.pdf.set_font(family, "", BODY.font_size)
            return wrap_text(self.pdf, text, width)
        except Exception as exc:
            logger.debug("Measuring order details failed, keeping a single line: %s", exc)
            return [text]

    def add_delivery(self) -> None:
        self.text("Delivery Information:", MARGIN, SECTION)
        self.y += 10
        self.text(f"Type: {self.record.display('delivery_type')}", self.left_x)
        self.y += 15

    def add_payment(self) -> None:
        record = self.record
        self.text("Payment Information:", MARGIN, SECTION)
        self.y += 10
        self.text(f"Total Amount: {money(record.total_payment)}", self.left_x, SECTION)
        if record.payment_type:
            self.text(f"Payment Type: {record.payment_type.upper()}", self.right_x)
        self.y += 8

        if is_positive(record.advance_payment):
            self.text(f"Advance Payment: {money(record.advance_payment)}", self.left_x)
            self.y += 8
        if is_positive(record.balance_payment):
            self.text(f"Balance Payment: {money(record.balance_payment)}", self.right_x)
            self.y += 8
        if is_positive(record.discount):
            self.text(f"Discount: {money(record.discount)}", self.left_x)
            self.y += 8
        self.y += 8

    def add_footer(self) -> None:
        top = self.footer_top
        self.pdf.draw_line(MARGIN, top, self.page_width - MARGIN, top, color=RULE, width=0.5)
        render_text(
            self.pdf,
            "Thank you for your order!",
            self.page_width / 2,
            top + 10,
            RenderStyle(align="center", font_size=10, color=MUTED),
        )


def render_receipt(record: OrderRecord, header_image: HeaderSource = None) -> OrderPDF:
    """Lay out the receipt for a single order."""
    return ReceiptLayout(record, header_image).build()
