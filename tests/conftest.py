import pathlib
import sys

import pytest

root = pathlib.Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from order_desk import create_app
from order_desk.services import fonts

SYSTEM_ARABIC_FONTS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/noto/NotoSansArabic-Regular.ttf",
    "/usr/share/fonts/noto/NotoSansArabic-Regular.ttf",
)


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("ORDER_DESK_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("ORDER_DESK_SECRET_KEY", "test-secret")
    monkeypatch.setenv("ORDER_DESK_RECEIPT_HEADER", str(tmp_path / "missing-header.png"))
    app = create_app()
    app.config.update(TESTING=True)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sample_orders():
    return [
        {
            "receiptNo": "R-1001",
            "name": "محمد أحمد",
            "orderDetails": "2x شاورما دجاج، 1x حمص",
            "phoneNumber": "91234567",
            "deliveryType": "Delivery",
            "date": "2024-01-15",
            "time": "12:30",
            "cookStatus": "pending",
            "totalPayment": "12.500",
            "advancePayment": "0.000",
            "balancePayment": "12.500",
            "paymentType": "cash",
            "isPaid": False,
        },
        {
            "receiptNo": "R-1002",
            "name": "John Smith",
            "orderDetails": "1x Chicken Burger, 1x Fries",
            "phoneNumber": "99887766",
            "deliveryType": "Pickup",
            "date": "2024-01-15",
            "time": "13:05",
            "cookStatus": "ready",
            "totalPayment": "4.750",
            "advancePayment": "4.750",
            "discount": "0.250",
            "paymentType": "atm",
            "isPaid": True,
        },
    ]


@pytest.fixture
def no_arabic_font(monkeypatch):
    """Run with an empty font registry (Helvetica fallbacks only)."""
    monkeypatch.setattr(fonts, "registry", fonts.FontRegistry(()))


@pytest.fixture
def arabic_font(monkeypatch):
    """Register an installed Arabic-capable TTF, or skip when none exists."""
    for candidate in SYSTEM_ARABIC_FONTS:
        path = pathlib.Path(candidate)
        if path.exists():
            asset = fonts.FontAsset(name=path.stem.split("-")[0], payload=path.read_bytes())
            monkeypatch.setattr(fonts, "registry", fonts.FontRegistry((asset,)))
            return asset
    pytest.skip("no Arabic-capable TTF installed")
