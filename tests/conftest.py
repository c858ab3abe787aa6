from collections.abc import Callable
from datetime import date, time
from decimal import Decimal
from pathlib import Path

import pytest

from degiro_portfolio.config import get_settings
from degiro_portfolio.domain.transactions import Transaction

APPLE_ISIN = "US0378331005"
ASML_ISIN = "NL0010273215"

EXPORT_HEADER = (
    "Date,Time,Product,ISIN,Reference exchange,Venue,Quantity,Price,,"
    "Local value,,Value EUR,Exchange rate,AutoFX Fee,"
    "Transaction and/or third party fees EUR,Total EUR,Order ID,"
)

SAMPLE_EXPORT = f"""{EXPORT_HEADER}
10-01-2024,15:00,APPLE INC,{APPLE_ISIN},NDQ,XNAS,-15,"120,00",USD,"1800,00",USD,"1800,00","1,0000","0,00","-1,50","1798,50",,c3
02-01-2024,09:30,APPLE INC,{APPLE_ISIN},NDQ,XNAS,10,"100,00",USD,"-1000,00",USD,"-1000,00","1,0000","0,00","-1,00","-1001,00",,a1
05-01-2024,09:31,APPLE INC,{APPLE_ISIN},NDQ,XNAS,10,"110,00",USD,"-1100,00",USD,"-1100,00","1,0000","0,00","-1,00","-1101,00",,b2

03-01-2024,10:00,ASML HOLDING,{ASML_ISIN},EAM,XAMS,2,"600,50",EUR,"-1201,00",EUR,"-1201,00",,"0,00","-4,90","-1205,90",,d4
"""


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate tests from DEGIRO_* variables and cached settings."""
    monkeypatch.delenv("DEGIRO_LOG_LEVEL", raising=False)
    monkeypatch.delenv("DEGIRO_COLOR_OUTPUT", raising=False)
    monkeypatch.delenv("DEGIRO_REPORTING_CURRENCY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_transaction() -> Callable[..., Transaction]:
    """Build a transaction with DEGIRO sign conventions (buys cost money)."""

    def _make(
        quantity: str | int,
        price: str | int,
        *,
        isin: str = APPLE_ISIN,
        product: str = "APPLE INC",
        trade_date: date = date(2024, 1, 2),
        trade_time: time = time(9, 30),
        fees: str | int = "0",
    ) -> Transaction:
        qty = Decimal(str(quantity))
        unit_price = Decimal(str(price))
        value = -qty * unit_price
        fee = Decimal(str(fees))
        return Transaction(
            trade_date=trade_date,
            trade_time=trade_time,
            product=product,
            isin=isin,
            quantity=qty,
            price=unit_price,
            value=value,
            fees=fee,
            total=value + fee,
        )

    return _make


@pytest.fixture
def sample_export(tmp_path: Path) -> Path:
    export = tmp_path / "Transactions.csv"
    export.write_text(SAMPLE_EXPORT, encoding="utf-8")
    return export
