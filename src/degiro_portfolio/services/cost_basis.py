"""FIFO cost-basis matching for brokerage transactions."""

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal

from degiro_portfolio.domain.reports import AssetReport
from degiro_portfolio.domain.transactions import LotMatch, OpenLot, Transaction
from degiro_portfolio.domain.value_objects import ZERO, MatchingWarning, WarningKind
from degiro_portfolio.logging_config import LogContext, get_logger

logger = get_logger(__name__)


class LotQueue:
    """Open lots in acquisition order.

    Lots are kept in a list and a cursor marks the oldest lot that still has
    quantity left, so consumed lots are skipped rather than removed.
    """

    def __init__(self) -> None:
        self._lots: list[OpenLot] = []
        self._head = 0

    def __len__(self) -> int:
        return len(self._lots) - self._head

    def __bool__(self) -> bool:
        return self._head < len(self._lots)

    def push(self, lot: OpenLot) -> None:
        self._lots.append(lot)

    @property
    def remaining_quantity(self) -> Decimal:
        return sum((lot.remaining_quantity for lot in self.open_lots()), ZERO)

    def open_lots(self) -> list[OpenLot]:
        return self._lots[self._head :]

    def match(
        self, quantity: Decimal, sale_price: Decimal, sold_at: datetime
    ) -> tuple[list[LotMatch], Decimal]:
        """Consume up to ``quantity`` units from the oldest lots.

        Returns the matches made and the quantity left unmatched once the
        queue ran dry.
        """
        matches: list[LotMatch] = []
        remaining = quantity

        while remaining > ZERO and self._head < len(self._lots):
            lot = self._lots[self._head]
            matched = min(remaining, lot.remaining_quantity)

            matches.append(
                LotMatch(
                    sold_at=sold_at,
                    acquired_at=lot.acquired_at,
                    quantity=matched,
                    cost_price=lot.unit_price,
                    sale_price=sale_price,
                )
            )
            lot.consume(matched)
            remaining -= matched

            if lot.is_closed:
                self._head += 1

        return matches, remaining


def group_by_instrument(
    transactions: Iterable[Transaction],
) -> dict[str, list[Transaction]]:
    """Group transactions by ISIN, keeping input order within each group."""
    groups: dict[str, list[Transaction]] = {}
    for txn in transactions:
        groups.setdefault(txn.isin, []).append(txn)
    return groups


def sort_chronologically(transactions: Sequence[Transaction]) -> list[Transaction]:
    """Oldest first. The sort is stable, so equal timestamps keep input order."""
    return sorted(transactions, key=lambda txn: txn.timestamp)


class CostBasisEngine:
    """Computes per-instrument FIFO cost basis and realized P&L."""

    def compute_reports(self, transactions: Iterable[Transaction]) -> list[AssetReport]:
        """Returns one report per ISIN, sorted by product name ignoring case."""
        groups = group_by_instrument(transactions)

        reports = [
            self.compute_instrument_report(isin, group) for isin, group in groups.items()
        ]
        reports.sort(
            key=lambda report: (report.product.casefold(), report.product, report.isin)
        )

        logger.debug("reports_computed", instruments=len(reports))
        return reports

    def compute_instrument_report(
        self, isin: str, transactions: Sequence[Transaction]
    ) -> AssetReport:
        """Run FIFO matching over one instrument's transactions."""
        with LogContext(isin=isin):
            return self._compute(isin, sort_chronologically(transactions))

    def _compute(self, isin: str, ordered: list[Transaction]) -> AssetReport:
        product = ordered[0].product if ordered else ""
        buy_quantity = ZERO
        buy_total = ZERO
        sell_quantity = ZERO
        sell_total = ZERO
        total_fees = ZERO
        realized_pnl = ZERO
        unmatched_quantity = ZERO

        lots = LotQueue()
        matches: list[LotMatch] = []
        warnings: list[MatchingWarning] = []
        previous_timestamp: datetime | None = None

        for txn in ordered:
            timestamp = txn.timestamp
            warnings.extend(self._check_transaction(isin, txn, previous_timestamp))
            previous_timestamp = timestamp

            total_fees += abs(txn.fees)

            if txn.is_buy:
                lots.push(
                    OpenLot(
                        remaining_quantity=txn.quantity,
                        unit_price=txn.price,
                        acquired_at=timestamp,
                    )
                )
                buy_quantity += txn.quantity
                buy_total += abs(txn.value)
                continue

            quantity = txn.abs_quantity
            sell_quantity += quantity
            sell_total += abs(txn.value)

            sell_matches, unmatched = lots.match(quantity, txn.price, timestamp)
            for match in sell_matches:
                realized_pnl += match.realized_pnl
            matches.extend(sell_matches)

            if unmatched > ZERO:
                unmatched_quantity += unmatched
                warnings.append(
                    MatchingWarning(
                        kind=WarningKind.OVERSELL,
                        isin=isin,
                        message=(
                            f"Sell of {quantity} exceeds open lots; "
                            f"{unmatched} units left unmatched"
                        ),
                        timestamp=timestamp,
                        quantity=unmatched,
                    )
                )
                logger.warning(
                    "sell_exceeds_open_lots",
                    sold_at=timestamp.isoformat(),
                    quantity=str(quantity),
                    unmatched=str(unmatched),
                )

        remaining_quantity = buy_quantity - sell_quantity
        break_even_price = buy_total / buy_quantity if buy_quantity > ZERO else ZERO
        avg_sell_price = sell_total / sell_quantity if sell_quantity > ZERO else ZERO

        if remaining_quantity < ZERO:
            warnings.append(
                MatchingWarning(
                    kind=WarningKind.SHORT_POSITION,
                    isin=isin,
                    message=f"More sold than bought; net position is {remaining_quantity}",
                    quantity=remaining_quantity,
                )
            )
            logger.warning("net_short_position", remaining_quantity=str(remaining_quantity))

        return AssetReport(
            product=product,
            isin=isin,
            buy_quantity=buy_quantity,
            buy_total=buy_total,
            sell_quantity=sell_quantity,
            sell_total=sell_total,
            total_fees=total_fees,
            break_even_price=break_even_price,
            avg_sell_price=avg_sell_price,
            remaining_quantity=remaining_quantity,
            realized_pnl=realized_pnl,
            open_lots=tuple(lots.open_lots()),
            matches=tuple(matches),
            warnings=tuple(warnings),
            unmatched_quantity=unmatched_quantity,
        )

    def _check_transaction(
        self,
        isin: str,
        txn: Transaction,
        previous_timestamp: datetime | None,
    ) -> list[MatchingWarning]:
        """Flag records that are unusual but still processed as-is."""
        timestamp = txn.timestamp
        found: list[MatchingWarning] = []

        if txn.price < ZERO:
            found.append(
                MatchingWarning(
                    kind=WarningKind.NEGATIVE_PRICE,
                    isin=isin,
                    message=f"Negative unit price {txn.price}",
                    timestamp=timestamp,
                )
            )
            logger.warning(
                "negative_unit_price", traded_at=timestamp.isoformat(), price=str(txn.price)
            )

        if txn.quantity == ZERO:
            found.append(
                MatchingWarning(
                    kind=WarningKind.ZERO_QUANTITY,
                    isin=isin,
                    message="Zero quantity record treated as an empty sell",
                    timestamp=timestamp,
                )
            )
            logger.info("zero_quantity_record", traded_at=timestamp.isoformat())

        if previous_timestamp is not None and timestamp == previous_timestamp:
            found.append(
                MatchingWarning(
                    kind=WarningKind.DUPLICATE_TIMESTAMP,
                    isin=isin,
                    message="Shares its timestamp with the previous record; file order kept",
                    timestamp=timestamp,
                )
            )
            logger.info("duplicate_timestamp", traded_at=timestamp.isoformat())

        return found


def compute_reports(transactions: Iterable[Transaction]) -> list[AssetReport]:
    """Compute FIFO reports for all instruments in ``transactions``."""
    return CostBasisEngine().compute_reports(transactions)
