from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal

from degiro_portfolio.domain.value_objects import ZERO, TradeSide


class InsufficientQuantityError(Exception):
    pass


@dataclass(frozen=True)
class Transaction:
    """One ledger event for one instrument, as read from the export.

    ``value`` and ``total`` are in the reporting currency; their sign follows
    the broker's convention, so callers take the absolute value.
    """

    trade_date: date
    trade_time: time
    product: str
    isin: str
    quantity: Decimal
    price: Decimal
    value: Decimal = ZERO
    fees: Decimal = ZERO
    total: Decimal = ZERO

    @property
    def timestamp(self) -> datetime:
        return datetime.combine(self.trade_date, self.trade_time)

    @property
    def side(self) -> TradeSide:
        # A zero quantity counts as a sell of zero units: it adds nothing to
        # the sold totals and consumes no lots.
        if self.quantity > ZERO:
            return TradeSide.BUY
        return TradeSide.SELL

    @property
    def is_buy(self) -> bool:
        return self.side == TradeSide.BUY

    @property
    def is_sell(self) -> bool:
        return self.side == TradeSide.SELL

    @property
    def abs_quantity(self) -> Decimal:
        return abs(self.quantity)


@dataclass
class OpenLot:
    """A bought tranche not yet fully consumed by later sells."""

    remaining_quantity: Decimal
    unit_price: Decimal
    acquired_at: datetime
    original_quantity: Decimal = field(init=False)

    def __post_init__(self) -> None:
        self.original_quantity = self.remaining_quantity

    @property
    def is_closed(self) -> bool:
        return self.remaining_quantity <= ZERO

    @property
    def remaining_cost(self) -> Decimal:
        return self.remaining_quantity * self.unit_price

    def consume(self, quantity: Decimal) -> None:
        if quantity > self.remaining_quantity:
            raise InsufficientQuantityError(
                f"Cannot consume {quantity} from lot with "
                f"{self.remaining_quantity} remaining"
            )
        self.remaining_quantity -= quantity


@dataclass(frozen=True)
class LotMatch:
    """The part of one sell that was matched against one open lot."""

    sold_at: datetime
    acquired_at: datetime
    quantity: Decimal
    cost_price: Decimal
    sale_price: Decimal

    @property
    def realized_pnl(self) -> Decimal:
        return self.quantity * (self.sale_price - self.cost_price)
