from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from degiro_portfolio.domain.transactions import LotMatch, OpenLot
from degiro_portfolio.domain.value_objects import ZERO, MatchingWarning, WarningKind


@dataclass(frozen=True)
class AssetReport:
    """Cost basis, realized P&L and position size for one instrument."""

    product: str
    isin: str
    buy_quantity: Decimal
    buy_total: Decimal
    sell_quantity: Decimal
    sell_total: Decimal
    total_fees: Decimal
    # Weighted average buy price (cost basis per unit).
    break_even_price: Decimal
    avg_sell_price: Decimal
    # Net position: positive while holding, zero once fully closed.
    remaining_quantity: Decimal
    # P&L of sold quantity matched FIFO against earlier buys.
    realized_pnl: Decimal
    open_lots: tuple[OpenLot, ...] = ()
    matches: tuple[LotMatch, ...] = ()
    warnings: tuple[MatchingWarning, ...] = ()
    unmatched_quantity: Decimal = ZERO

    @property
    def net_pnl(self) -> Decimal:
        return self.realized_pnl - self.total_fees

    @property
    def is_closed(self) -> bool:
        return self.remaining_quantity == ZERO

    @property
    def is_short(self) -> bool:
        return self.remaining_quantity < ZERO

    @property
    def has_oversell(self) -> bool:
        return any(w.kind == WarningKind.OVERSELL for w in self.warnings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "product": self.product,
            "isin": self.isin,
            "buy_quantity": str(self.buy_quantity),
            "buy_total": str(self.buy_total),
            "sell_quantity": str(self.sell_quantity),
            "sell_total": str(self.sell_total),
            "total_fees": str(self.total_fees),
            "break_even_price": str(self.break_even_price),
            "avg_sell_price": str(self.avg_sell_price),
            "remaining_quantity": str(self.remaining_quantity),
            "realized_pnl": str(self.realized_pnl),
            "net_pnl": str(self.net_pnl),
            "unmatched_quantity": str(self.unmatched_quantity),
            "open_lots": [
                {
                    "acquired_at": lot.acquired_at.isoformat(),
                    "remaining_quantity": str(lot.remaining_quantity),
                    "unit_price": str(lot.unit_price),
                }
                for lot in self.open_lots
            ],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class PortfolioSummary:
    """Totals across all instrument reports."""

    total_bought: Decimal
    total_sold: Decimal
    total_fees: Decimal
    total_realized_pnl: Decimal
    instrument_count: int

    @property
    def total_net_pnl(self) -> Decimal:
        return self.total_realized_pnl - self.total_fees

    @classmethod
    def from_reports(cls, reports: Iterable[AssetReport]) -> PortfolioSummary:
        total_bought = ZERO
        total_sold = ZERO
        total_fees = ZERO
        total_realized_pnl = ZERO
        count = 0

        for report in reports:
            total_bought += report.buy_total
            total_sold += report.sell_total
            total_fees += report.total_fees
            total_realized_pnl += report.realized_pnl
            count += 1

        return cls(
            total_bought=total_bought,
            total_sold=total_sold,
            total_fees=total_fees,
            total_realized_pnl=total_realized_pnl,
            instrument_count=count,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_bought": str(self.total_bought),
            "total_sold": str(self.total_sold),
            "total_fees": str(self.total_fees),
            "total_realized_pnl": str(self.total_realized_pnl),
            "total_net_pnl": str(self.total_net_pnl),
            "instrument_count": self.instrument_count,
        }
