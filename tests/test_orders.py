from datetime import date
from decimal import Decimal

import pytest

from order_desk.services.orders import (
    CookStatus,
    DeliveryType,
    OrderRecord,
    PaymentType,
    compute_kpis,
    records_from_payload,
    summarize,
)
from order_desk.services.payments import is_positive, money, money_total, parse_amount


def test_from_dict_accepts_dashboard_keys(sample_orders):
    record = OrderRecord.from_dict(sample_orders[0])
    assert record.receipt_no == "R-1001"
    assert record.order_details == "2x شاورما دجاج، 1x حمص"
    assert record.phone_number == "91234567"
    assert record.status == "pending"
    assert record.total_payment == "12.500"
    assert record.is_paid is False
    assert record.delivery_kind is DeliveryType.DELIVERY
    assert record.cook_state is CookStatus.PENDING
    assert record.payment_kind is PaymentType.CASH


def test_from_dict_accepts_snake_case_and_aliases():
    record = OrderRecord.from_dict(
        {"order_id": 42, "name": "  Sara ", "totalAmount": "3.000", "cook_status": "Ready", "paid": "yes"}
    )
    assert record.order_id == "42"
    assert record.reference == "42"
    assert record.name == "Sara"
    assert record.total_payment == "3.000"
    assert record.cook_state is CookStatus.READY
    assert record.is_paid is True


def test_cook_status_wins_over_status():
    record = OrderRecord.from_dict({"status": "active", "cookStatus": "preparing"})
    assert record.status == "preparing"


def test_blank_values_become_missing():
    record = OrderRecord.from_dict({"name": "   ", "phoneNumber": ""})
    assert record.name is None
    assert record.display("name") == "N/A"
    assert record.display("phone_number") == "N/A"
    assert record.is_paid is None


def test_unknown_enums_fall_back():
    record = OrderRecord(delivery_type="drone", status="lost", payment_type="crypto")
    assert record.delivery_kind is DeliveryType.OTHER
    assert record.cook_state is CookStatus.UNKNOWN
    assert record.payment_kind is None


def test_records_from_payload_rejects_non_objects():
    with pytest.raises(ValueError):
        records_from_payload([{"name": "ok"}, "nope"])


def test_summary_counts_statuses():
    records = [
        OrderRecord(status="pending", total_payment="1.500"),
        OrderRecord(status="pending", total_payment="2.500"),
        OrderRecord(total_payment="abc"),
    ]
    summary = summarize(records)
    assert summary.total_orders == 3
    assert summary.total_amount == Decimal("4.000")
    assert summary.status_counts == {"pending": 2, "Unknown": 1}


def test_summary_of_nothing():
    summary = summarize([])
    assert summary.total_orders == 0
    assert summary.average_amount == Decimal("0")


def test_kpis():
    records = [
        OrderRecord(date="2024-01-15", status="pending"),
        OrderRecord(date="2024-01-15", status="preparing"),
        OrderRecord(date="2024-01-15T18:30:00", status="delivered"),
        OrderRecord(date="2024-01-15", status="completed"),
        OrderRecord(date="2024-01-14", status="completed"),
        OrderRecord(date="2024-01-16", status="pending"),
        OrderRecord(date="2024-02-01", status="preparing"),
        OrderRecord(date="soon", status="preparing"),
    ]
    kpis = compute_kpis(records, on=date(2024, 1, 15))
    assert kpis.today_orders == 4
    assert kpis.cooked_orders == 3
    assert kpis.completed_orders == 2
    assert kpis.upcoming_orders == 2
    assert kpis.as_dict() == {
        "today_orders": 4,
        "cooked_orders": 3,
        "completed_orders": 2,
        "upcoming_orders": 2,
    }


def test_kpis_of_nothing():
    assert compute_kpis([], on=date(2024, 1, 15)).as_dict() == {
        "today_orders": 0,
        "cooked_orders": 0,
        "completed_orders": 0,
        "upcoming_orders": 0,
    }


def test_scheduled_on():
    assert OrderRecord(date="2024-01-15").scheduled_on == date(2024, 1, 15)
    assert OrderRecord(date="15/01/2024").scheduled_on is None
    assert OrderRecord().scheduled_on is None


@pytest.mark.parametrize(
    "raw, expected",
    [("12.500", Decimal("12.500")), ("1,250.5", Decimal("1250.5")), ("", Decimal("0")), (None, Decimal("0")), ("12 OMR", Decimal("0"))],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_money_formatting():
    assert money("12.500") == "OMR 12.500"
    assert money(None) == "OMR 0.000"
    assert money("") == "OMR 0.000"
    assert money_total(Decimal("2.345")) == "2.35"
    assert is_positive("0.001")
    assert not is_positive("0.000")
    assert not is_positive("-1")
