from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

ZERO = Decimal("0")


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class WarningKind(str, Enum):
    OVERSELL = "oversell"
    NEGATIVE_PRICE = "negative_price"
    DUPLICATE_TIMESTAMP = "duplicate_timestamp"
    ZERO_QUANTITY = "zero_quantity"
    SHORT_POSITION = "short_position"

    @property
    def is_informational(self) -> bool:
        return self in (WarningKind.DUPLICATE_TIMESTAMP, WarningKind.ZERO_QUANTITY)


@dataclass(frozen=True)
class MatchingWarning:
    """A non-fatal anomaly found while matching one instrument's trades."""

    kind: WarningKind
    isin: str
    message: str
    timestamp: datetime | None = None
    quantity: Decimal | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "kind": self.kind.value,
            "isin": self.isin,
            "message": self.message,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "quantity": str(self.quantity) if self.quantity is not None else None,
        }
