"""Order records as received from the order service, plus derived statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from order_desk.services.payments import parse_amount

NOT_AVAILABLE = "N/A"


class DeliveryType(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"
    OTHER = "other"


class CookStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    UNKNOWN = "unknown"


class PaymentType(str, Enum):
    CASH = "cash"
    ATM = "atm"
    TRANSFER = "transfer"


def _parse_enum(enum_cls, value: str | None, fallback):
    if not value:
        return fallback
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return fallback


@dataclass(frozen=True)
class OrderRecord:
    receipt_no: str | None = None
    order_id: str | None = None
    name: str | None = None
    order_details: str | None = None
    phone_number: str | None = None
    delivery_type: str | None = None
    date: str | None = None
    time: str | None = None
    status: str | None = None
    total_payment: str | None = None
    advance_payment: str | None = None
    balance_payment: str | None = None
    discount: str | None = None
    payment_type: str | None = None
    location: str | None = None
    address: str | None = None
    is_paid: bool | None = None

    @property
    def delivery_kind(self) -> DeliveryType:
        return _parse_enum(DeliveryType, self.delivery_type, DeliveryType.OTHER)

    @property
    def cook_state(self) -> CookStatus:
        return _parse_enum(CookStatus, self.status, CookStatus.UNKNOWN)

    @property
    def payment_kind(self) -> PaymentType | None:
        return _parse_enum(PaymentType, self.payment_type, None)

    @property
    def scheduled_on(self) -> date | None:
        """Order date parsed from its ISO prefix; None when missing or malformed."""
        try:
            return date.fromisoformat((self.date or "")[:10])
        except ValueError:
            return None

    @property
    def reference(self) -> str | None:
        """Receipt number, falling back to the order id."""
        return self.receipt_no or self.order_id

    def display(self, field_name: str) -> str:
        value = getattr(self, field_name)
        return str(value) if value not in (None, "") else NOT_AVAILABLE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OrderRecord":
        """Build a record from dashboard (camelCase) or snake_case keys."""
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = None
            for key in _KEY_ALIASES.get(f.name, ()) + (f.name,):
                if data.get(key) not in (None, ""):
                    raw = data[key]
                    break
            if f.name == "is_paid":
                values[f.name] = None if raw is None else _as_bool(raw)
            else:
                text = "" if raw is None else str(raw).strip()
                values[f.name] = text or None
        return cls(**values)


_KEY_ALIASES: dict[str, tuple[str, ...]] = {
    "receipt_no": ("receiptNo",),
    "order_id": ("orderId",),
    "order_details": ("orderDetails",),
    "phone_number": ("phoneNumber",),
    "delivery_type": ("deliveryType",),
    "status": ("cookStatus", "cook_status"),
    "total_payment": ("totalPayment", "totalAmount"),
    "advance_payment": ("advancePayment",),
    "balance_payment": ("balancePayment",),
    "payment_type": ("paymentType",),
    "is_paid": ("isPaid", "paid"),
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "paid"}
    return bool(value)


def records_from_payload(items: Iterable[Mapping[str, Any]]) -> list[OrderRecord]:
    records = []
    for item in items:
        if not isinstance(item, Mapping):
            raise ValueError("Each order must be a JSON object")
        records.append(OrderRecord.from_dict(item))
    return records


@dataclass(frozen=True)
class OrderSummary:
    total_orders: int
    total_amount: Decimal
    average_amount: Decimal
    status_counts: dict[str, int]


def summarize(records: Sequence[OrderRecord]) -> OrderSummary:
    total = sum((parse_amount(r.total_payment) for r in records), Decimal("0"))
    count = len(records)
    average = total / count if count else Decimal("0")
    statuses = Counter(r.status or "Unknown" for r in records)
    return OrderSummary(count, total, average, dict(statuses))


@dataclass(frozen=True)
class DashboardKpis:
    today_orders: int
    cooked_orders: int
    completed_orders: int
    upcoming_orders: int

    def as_dict(self) -> dict[str, int]:
        return {
            "today_orders": self.today_orders,
            "cooked_orders": self.cooked_orders,
            "completed_orders": self.completed_orders,
            "upcoming_orders": self.upcoming_orders,
        }


def compute_kpis(records: Sequence[OrderRecord], on: date | None = None) -> DashboardKpis:
    """
    Receptionist overview counters relative to the day ``on`` (default: today).

    Cooking counts every order still being prepared. Completed counts today's
    orders that were delivered or completed. Upcoming counts orders scheduled
    after ``on``. Orders without a readable date only count as cooking.
    """
    today = on or date.today()
    todays = [r for r in records if r.scheduled_on == today]
    cooked = sum(1 for r in records if r.cook_state is CookStatus.PREPARING)
    completed = sum(
        1 for r in todays if r.cook_state in (CookStatus.COMPLETED, CookStatus.DELIVERED)
    )
    upcoming = sum(1 for r in records if r.scheduled_on is not None and r.scheduled_on > today)
    return DashboardKpis(len(todays), cooked, completed, upcoming)
