"""Paginated order list report (landscape A4)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Sequence

from order_desk.services.orders import NOT_AVAILABLE, OrderRecord, summarize
from order_desk.services.payments import money_total
from order_desk.services.pdf import ELLIPSIS, OrderPDF, RenderStyle, render_text
from order_desk.services.script import sanitize_text

DEFAULT_TITLE = "Today's Orders"

# Header labels are fixed regardless of the dashboard language. The heading is
# the shop's Arabic "Today's Orders"; the rest stays in English.
LABELS = {
    "title": "طلبات اليوم",
    "generated_on": "Generated on",
    "no_orders": "No orders to display",
    "summary": "Order Summary",
    "status_breakdown": "Status Breakdown:",
}

MARGIN = 15
BOTTOM_RESERVE = 10
ROW_HEIGHT = 8
HEADER_HEIGHT = 10
CELL_LIMIT = 30
CELL_KEEP = 27

PRIMARY = (37, 99, 235)
SECONDARY = (100, 116, 139)
TEXT = (30, 41, 59)
BORDER = (226, 232, 240)
HEADER_BG = (248, 250, 252)
ALTERNATE_ROW = (249, 250, 251)

FONT_TITLE = 20
FONT_HEADER = 14
FONT_BODY = 10
FONT_SMALL = 8


@dataclass(frozen=True)
class Column:
    header: str
    field: str
    width: float
    align: str = "left"


COLUMNS: tuple[Column, ...] = (
    Column("Receipt No", "receipt_no", 28),
    Column("Customer", "name", 32),
    Column("Order Details", "order_details", 45),
    Column("Phone Number", "phone_number", 30),
    Column("Delivery Type", "delivery_type", 30),
    Column("Date", "date", 28),
    Column("Time", "time", 25),
)
TABLE_WIDTH = sum(col.width for col in COLUMNS)


@dataclass(frozen=True)
class ReportOptions:
    title: str = DEFAULT_TITLE
    show_summary: bool = False
    show_footer: bool = False
    generated_at: datetime | None = None


def truncate_cell(value: str) -> str:
    """Shorten over-long cell values before they reach the text renderer."""
    if len(value) > CELL_LIMIT:
        return value[:CELL_KEEP] + ELLIPSIS
    return value


def cell_value(record: OrderRecord, column: Column) -> str:
    if column.field == "receipt_no":
        value = record.reference or NOT_AVAILABLE
    else:
        value = record.display(column.field)
    return sanitize_text(truncate_cell(value))


def _generated_stamp(moment: datetime) -> str:
    return moment.strftime("%m/%d/%Y %I:%M:%S %p")


class ReportLayout:
    """Cursor-driven layout of one report document."""

    def __init__(self, records: Sequence[OrderRecord], options: ReportOptions) -> None:
        self.records = records
        self.options = options
        self.pdf = OrderPDF(orientation="L")
        self.pdf.add_page()
        self.y: float = MARGIN

    @property
    def page_width(self) -> float:
        return self.pdf.w

    @property
    def page_height(self) -> float:
        return self.pdf.h

    def ensure_space(self, required: float) -> bool:
        """Start a new page when ``required`` mm no longer fit; True if one was added."""
        if self.y + required > self.page_height - MARGIN - BOTTOM_RESERVE:
            self.pdf.add_page()
            self.y = MARGIN
            return True
        return False

    def build(self) -> OrderPDF:
        self.add_header()
        self.add_table()
        if self.options.show_summary:
            self.add_summary()
        if self.options.show_footer:
            self.add_footer()
        return self.pdf

    def add_header(self) -> None:
        center = self.page_width / 2
        render_text(
            self.pdf,
            LABELS["title"],
            center,
            self.y,
            RenderStyle(align="center", font_size=FONT_TITLE, font_style="bold", color=PRIMARY),
        )
        self.y += 15

        moment = self.options.generated_at or datetime.now()
        render_text(
            self.pdf,
            f"{LABELS['generated_on']}: {_generated_stamp(moment)}",
            center,
            self.y,
            RenderStyle(align="center", font_size=FONT_SMALL, color=SECONDARY),
        )
        self.y += 10

        self.pdf.draw_line(MARGIN, self.y, self.page_width - MARGIN, self.y, color=BORDER, width=0.5)
        self.y += 10

    def add_table(self) -> None:
        if not self.records:
            render_text(
                self.pdf,
                LABELS["no_orders"],
                self.page_width / 2,
                self.y + 20,
                RenderStyle(align="center", font_size=FONT_HEADER, color=SECONDARY),
            )
            return

        self.ensure_space(HEADER_HEIGHT + ROW_HEIGHT * 3)
        self.draw_table_header()
        for index, record in enumerate(self.records):
            if self.ensure_space(ROW_HEIGHT + 5):
                self.draw_table_header()
            self.draw_row(record, alternate=index % 2 == 1)
        self.y += 10

    def draw_table_header(self) -> None:
        top = self.y - 2
        x = MARGIN
        self.pdf.fill_rect(MARGIN, top, TABLE_WIDTH, HEADER_HEIGHT, color=HEADER_BG)
        for col in COLUMNS:
            self.pdf.draw_line(x, top, x, top + HEADER_HEIGHT, color=BORDER, width=0.3)
            render_text(
                self.pdf,
                col.header,
                x + col.width / 2,
                self.y + 4,
                RenderStyle(
                    align="center",
                    font_size=FONT_BODY,
                    font_style="bold",
                    max_width=col.width - 4,
                ),
            )
            x += col.width
        self.pdf.draw_line(x, top, x, top + HEADER_HEIGHT, color=BORDER, width=0.3)
        self.pdf.draw_line(MARGIN, top, x, top, color=BORDER, width=0.3)
        self.pdf.draw_line(MARGIN, top + HEADER_HEIGHT, x, top + HEADER_HEIGHT, color=BORDER, width=0.3)
        self.y += HEADER_HEIGHT

    def draw_row(self, record: OrderRecord, *, alternate: bool) -> None:
        top = self.y - 2
        x = MARGIN
        if alternate:
            self.pdf.fill_rect(MARGIN, top, TABLE_WIDTH, ROW_HEIGHT, color=ALTERNATE_ROW)
        for col in COLUMNS:
            self.pdf.draw_line(x, top, x, top + ROW_HEIGHT, color=BORDER, width=0.1)
            if col.align == "center":
                text_x = x + col.width / 2
            elif col.align == "right":
                text_x = x + col.width - 2
            else:
                text_x = x + 2
            render_text(
                self.pdf,
                cell_value(record, col),
                text_x,
                self.y + 3,
                RenderStyle(align=col.align, font_size=FONT_BODY - 1, max_width=col.width - 4),
            )
            x += col.width
        self.pdf.draw_line(x, top, x, top + ROW_HEIGHT, color=BORDER, width=0.1)
        self.pdf.draw_line(MARGIN, top + ROW_HEIGHT, x, top + ROW_HEIGHT, color=BORDER, width=0.1)
        self.y += ROW_HEIGHT

    def add_summary(self) -> None:
        if not self.records:
            return
        self.ensure_space(50)
        self.pdf.draw_line(MARGIN, self.y, self.page_width - MARGIN, self.y, color=BORDER, width=0.5)
        self.y += 15

        render_text(
            self.pdf,
            LABELS["summary"],
            MARGIN,
            self.y,
            RenderStyle(align="left", font_size=FONT_HEADER, font_style="bold", color=PRIMARY),
        )
        self.y += 15

        summary = summarize(self.records)
        body = RenderStyle(align="left", font_size=FONT_BODY)
        left_y = self.y
        for line in (
            f"Total Orders: {summary.total_orders}",
            f"Total Amount: {money_total(summary.total_amount)}",
            f"Average Amount: {money_total(summary.average_amount)}",
        ):
            render_text(self.pdf, line, MARGIN, left_y, body)
            left_y += 8

        right_x = self.page_width / 2
        right_y = self.y
        render_text(self.pdf, LABELS["status_breakdown"], right_x, right_y, replace(body, font_style="bold"))
        right_y += 10
        item = RenderStyle(align="left", font_size=FONT_BODY - 1, color=SECONDARY)
        for status, count in summary.status_counts.items():
            render_text(self.pdf, f"{status}: {count}", right_x + 10, right_y, item)
            right_y += 7

        self.y = max(left_y, right_y) + 10

    def add_footer(self) -> None:
        total = self.pdf.page
        current = self.pdf.page
        footer_y = self.page_height - MARGIN + 5
        for number in range(1, total + 1):
            self.pdf.page = number
            render_text(
                self.pdf,
                f"Page {number} of {total}",
                self.page_width - MARGIN,
                footer_y,
                RenderStyle(align="right", font_size=FONT_SMALL, color=SECONDARY),
            )
            self.pdf.draw_line(
                MARGIN, footer_y - 3, self.page_width - MARGIN, footer_y - 3, color=BORDER, width=0.3
            )
        self.pdf.page = current


def render_report(records: Sequence[OrderRecord], options: ReportOptions | None = None) -> OrderPDF:
    """Lay out the order table report for ``records``."""
    return ReportLayout(records, options or ReportOptions()).build()
