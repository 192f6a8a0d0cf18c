from datetime import datetime

import pytest

from order_desk.services.orders import OrderRecord, records_from_payload
from order_desk.services.reports import (
    COLUMNS,
    MARGIN,
    LABELS,
    ReportLayout,
    ReportOptions,
    cell_value,
    render_report,
    truncate_cell,
)

HEADERS = [col.header for col in COLUMNS]


def _orders(count):
    return [
        OrderRecord(
            receipt_no=f"R-{n:04d}",
            name=f"Customer {n}",
            order_details="1x Chicken Burger",
            phone_number="91234567",
            delivery_type="Pickup",
            date="2024-01-15",
            time="12:00",
            status="pending" if n % 2 else "ready",
            total_payment="2.500",
        )
        for n in range(count)
    ]


def _header_count(pdf, page):
    return pdf.texts(page).count("Receipt No")


def test_empty_report_shows_message_only(no_arabic_font):
    pdf = render_report([])
    texts = pdf.texts()
    assert len(texts) == 3
    assert LABELS["no_orders"] == texts[-1]
    assert not set(HEADERS) & set(texts)
    assert pdf.page == 1


def test_header_lines(no_arabic_font):
    moment = datetime(2024, 1, 15, 14, 5, 9)
    pdf = render_report(_orders(1), ReportOptions(generated_at=moment))
    texts = pdf.texts()
    # Without an Arabic font the heading degrades to placeholder glyphs.
    assert texts[0] == "????? ?????"
    assert texts[1] == "Generated on: 01/15/2024 02:05:09 PM"


def test_custom_title_does_not_change_heading(no_arabic_font):
    custom = render_report(_orders(1), ReportOptions(title="Lunch Shift"))
    default = render_report(_orders(1))
    assert custom.texts()[0] == default.texts()[0]
    assert "Lunch Shift" not in custom.texts()


def test_heading_uses_embedded_arabic_font(arabic_font):
    pdf = render_report([])
    heading = next(op for op in pdf.operations if op.kind == "text")
    assert heading.text == LABELS["title"]
    assert heading.family.lower() == arabic_font.name.lower()
    assert heading.align == "center"
    assert heading.style == "B"


def test_rows_render_every_column(no_arabic_font):
    pdf = render_report(_orders(1))
    texts = pdf.texts()
    for header in HEADERS:
        assert header in texts
    for value in ("R-0000", "Customer 0", "1x Chicken Burger", "91234567", "Pickup", "2024-01-15", "12:00"):
        assert value in texts


@pytest.mark.parametrize(
    "rows, pages",
    [(1, 1), (15, 1), (16, 2), (34, 2), (35, 3), (40, 3)],
)
def test_page_count_follows_row_capacity(no_arabic_font, rows, pages):
    assert render_report(_orders(rows)).page == pages


def test_column_header_repeats_on_each_page(no_arabic_font):
    pdf = render_report(_orders(40))
    assert pdf.page == 3
    for page in (1, 2, 3):
        assert _header_count(pdf, page) == 1
        header_ops = [op for op in pdf.operations if op.page == page and op.text == "Receipt No"]
        first_row = next(
            op for op in pdf.operations if op.page == page and op.kind == "text" and op.text.startswith("R-")
        )
        assert header_ops[0].y < first_row.y
    assert "R-0015" in pdf.texts(2)
    assert "R-0034" in pdf.texts(3)


def test_alternate_rows_are_shaded(no_arabic_font):
    pdf = render_report(_orders(4))
    shaded = [op for op in pdf.operations if op.kind == "rect" and op.color == (249, 250, 251)]
    assert len(shaded) == 2


def test_missing_values_show_placeholder(no_arabic_font):
    record = OrderRecord(order_id="ORD-9")
    assert cell_value(record, COLUMNS[0]) == "ORD-9"
    assert cell_value(record, COLUMNS[1]) == "N/A"
    assert cell_value(OrderRecord(), COLUMNS[0]) == "N/A"


def test_cell_truncation():
    assert truncate_cell("a" * 40) == "a" * 27 + "..."
    assert truncate_cell("a" * 30) == "a" * 30
    assert len(truncate_cell("b" * 31)) == 30


def test_arabic_rows_are_drawn(no_arabic_font, sample_orders):
    pdf = render_report(records_from_payload(sample_orders))
    assert "R-1001" in pdf.texts()
    assert "John Smith" in pdf.texts()
    assert pdf.page == 1


def test_summary_section(no_arabic_font):
    pdf = render_report(_orders(3), ReportOptions(show_summary=True))
    texts = pdf.texts()
    assert "Order Summary" in texts
    assert "Total Orders: 3" in texts
    assert "Total Amount: 7.50" in texts
    assert "Average Amount: 2.50" in texts
    assert "pending: 1" in texts
    assert "ready: 2" in texts


def test_summary_skipped_for_empty_report(no_arabic_font):
    pdf = render_report([], ReportOptions(show_summary=True))
    assert "Order Summary" not in pdf.texts()


def test_footer_numbers_every_page(no_arabic_font):
    pdf = render_report(_orders(20), ReportOptions(show_footer=True))
    assert pdf.page == 2
    assert "Page 1 of 2" in pdf.texts(1)
    assert "Page 2 of 2" in pdf.texts(2)


def test_toggles_do_not_move_the_table(no_arabic_font):
    plain = ReportLayout(_orders(5), ReportOptions())
    plain.add_header()
    plain.add_table()

    full = render_report(_orders(5), ReportOptions(show_summary=True, show_footer=True))
    plain_rows = [op.y for op in plain.pdf.operations if op.kind == "text" and op.text.startswith("R-")]
    full_rows = [op.y for op in full.operations if op.kind == "text" and op.text.startswith("R-")]
    assert plain_rows == full_rows


def test_reports_are_independent(no_arabic_font):
    big = render_report(_orders(40))
    small = render_report(_orders(1))
    assert big.page == 3
    assert small.page == 1
    assert "R-0039" not in small.texts()


def test_arabic_cells_use_embedded_font(arabic_font):
    record = OrderRecord(
        receipt_no="R-7",
        name="محمد أحمد محمد أحمد محمد أحمد محمد",
        order_details="شاورما",
        phone_number="91234567",
    )
    pdf = render_report([record])
    family = arabic_font.name.lower()
    arabic_ops = [op for op in pdf.operations if op.kind == "text" and op.family.lower() == family]
    # Heading, customer name and order details.
    assert len(arabic_ops) == 3

    name_op = next(op for op in arabic_ops if op.text.startswith("محمد"))
    assert name_op.align == "right"
    assert name_op.x == MARGIN + COLUMNS[0].width + 2
    assert name_op.text.endswith("...")
    assert len(name_op.text) <= 30

    details_op = next(op for op in arabic_ops if op.text.startswith("شاورما"))
    assert details_op.text == "شاورما"
    assert details_op.align == "right"

    latin = next(op for op in pdf.operations if op.kind == "text" and op.text == "91234567")
    assert latin.family == "helvetica"
    assert latin.align == "left"
