"""Tests for the FIFO cost-basis engine."""

import random
from datetime import date, datetime, time
from decimal import Decimal

import pytest

from degiro_portfolio.domain.transactions import OpenLot
from degiro_portfolio.domain.value_objects import WarningKind
from degiro_portfolio.services.cost_basis import (
    CostBasisEngine,
    LotQueue,
    compute_reports,
    group_by_instrument,
    sort_chronologically,
)

APPLE_ISIN = "US0378331005"
ASML_ISIN = "NL0010273215"


@pytest.fixture
def engine() -> CostBasisEngine:
    return CostBasisEngine()


def _lot(quantity: str, price: str, day: int = 1) -> OpenLot:
    return OpenLot(
        remaining_quantity=Decimal(quantity),
        unit_price=Decimal(price),
        acquired_at=datetime(2024, 1, day, 9, 0),
    )


class TestLotQueue:
    def test_empty_queue(self) -> None:
        queue = LotQueue()

        assert len(queue) == 0
        assert not queue
        assert queue.remaining_quantity == Decimal("0")

    def test_partial_fill_keeps_lot_open(self) -> None:
        queue = LotQueue()
        queue.push(_lot("10", "100", day=1))
        queue.push(_lot("10", "110", day=2))

        matches, unmatched = queue.match(
            Decimal("4"), Decimal("120"), datetime(2024, 1, 5, 10, 0)
        )

        assert unmatched == Decimal("0")
        assert len(matches) == 1
        assert matches[0].quantity == Decimal("4")
        assert matches[0].cost_price == Decimal("100")
        assert len(queue) == 2
        open_lots = queue.open_lots()
        assert open_lots[0].remaining_quantity == Decimal("6")
        assert open_lots[1].remaining_quantity == Decimal("10")

    def test_exhausted_lot_is_skipped(self) -> None:
        queue = LotQueue()
        queue.push(_lot("10", "100", day=1))
        queue.push(_lot("10", "110", day=2))

        matches, unmatched = queue.match(
            Decimal("15"), Decimal("120"), datetime(2024, 1, 5, 10, 0)
        )

        assert unmatched == Decimal("0")
        assert [m.quantity for m in matches] == [Decimal("10"), Decimal("5")]
        assert len(queue) == 1
        assert queue.open_lots()[0].unit_price == Decimal("110")
        assert queue.remaining_quantity == Decimal("5")

    def test_oversell_returns_unmatched_remainder(self) -> None:
        queue = LotQueue()
        queue.push(_lot("3", "100"))

        matches, unmatched = queue.match(
            Decimal("5"), Decimal("90"), datetime(2024, 1, 5, 10, 0)
        )

        assert sum(m.quantity for m in matches) == Decimal("3")
        assert unmatched == Decimal("2")
        assert not queue

    def test_match_on_empty_queue(self) -> None:
        queue = LotQueue()

        matches, unmatched = queue.match(
            Decimal("5"), Decimal("90"), datetime(2024, 1, 5, 10, 0)
        )

        assert matches == []
        assert unmatched == Decimal("5")


class TestGrouping:
    def test_groups_by_isin_preserving_order(self, make_transaction) -> None:
        a1 = make_transaction(1, 10, isin=APPLE_ISIN)
        b1 = make_transaction(2, 20, isin=ASML_ISIN, product="ASML HOLDING")
        a2 = make_transaction(3, 30, isin=APPLE_ISIN)

        groups = group_by_instrument([a1, b1, a2])

        assert set(groups) == {APPLE_ISIN, ASML_ISIN}
        assert groups[APPLE_ISIN] == [a1, a2]
        assert groups[ASML_ISIN] == [b1]

    def test_sort_is_chronological_and_stable(self, make_transaction) -> None:
        late = make_transaction(1, 10, trade_date=date(2024, 3, 1))
        tie_first = make_transaction(2, 10, trade_date=date(2024, 1, 1), trade_time=time(9, 0))
        tie_second = make_transaction(3, 10, trade_date=date(2024, 1, 1), trade_time=time(9, 0))
        earlier_time = make_transaction(4, 10, trade_date=date(2024, 1, 1), trade_time=time(8, 0))

        ordered = sort_chronologically([late, tie_first, tie_second, earlier_time])

        assert ordered == [earlier_time, tie_first, tie_second, late]


class TestComputeReports:
    def test_fifo_realized_pnl(self, engine: CostBasisEngine, make_transaction) -> None:
        # Buy 10 @ 100, buy 10 @ 110, sell 15 @ 120
        # FIFO realized = 10*(120-100) + 5*(120-110) = 250
        txns = [
            make_transaction(10, 100, trade_date=date(2024, 1, 2)),
            make_transaction(10, 110, trade_date=date(2024, 1, 3)),
            make_transaction(-15, 120, trade_date=date(2024, 1, 4)),
        ]

        [report] = engine.compute_reports(txns)

        assert report.realized_pnl == Decimal("250")
        assert report.buy_quantity == Decimal("20")
        assert report.buy_total == Decimal("2100")
        assert report.sell_quantity == Decimal("15")
        assert report.sell_total == Decimal("1800")
        assert report.break_even_price == Decimal("105")
        assert report.avg_sell_price == Decimal("120")
        assert report.remaining_quantity == Decimal("5")
        assert len(report.open_lots) == 1
        assert report.open_lots[0].remaining_quantity == Decimal("5")
        assert report.open_lots[0].unit_price == Decimal("110")
        assert report.warnings == ()

    def test_matches_record_consumed_lots(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(10, 100, trade_date=date(2024, 1, 2)),
            make_transaction(10, 110, trade_date=date(2024, 1, 3)),
            make_transaction(-15, 120, trade_date=date(2024, 1, 4)),
        ]

        [report] = engine.compute_reports(txns)

        assert [(m.quantity, m.cost_price) for m in report.matches] == [
            (Decimal("10"), Decimal("100")),
            (Decimal("5"), Decimal("110")),
        ]
        assert report.matches[0].acquired_at == datetime(2024, 1, 2, 9, 30)
        assert report.matches[1].sold_at == datetime(2024, 1, 4, 9, 30)
        assert sum(m.realized_pnl for m in report.matches) == report.realized_pnl

    def test_remaining_equals_bought_minus_sold(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction("2.5", 40, trade_date=date(2024, 1, 2)),
            make_transaction(-1, 45, trade_date=date(2024, 1, 3)),
            make_transaction(7, 38, trade_date=date(2024, 1, 4)),
            make_transaction("-3.5", 50, trade_date=date(2024, 1, 5)),
            make_transaction(-5, 52, trade_date=date(2024, 1, 6)),
        ]

        [report] = engine.compute_reports(txns)

        assert report.remaining_quantity == report.buy_quantity - report.sell_quantity
        assert report.remaining_quantity == Decimal("0")
        assert report.is_closed
        assert report.open_lots == ()

    def test_open_lots_sum_to_remaining_quantity(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(5, 10, trade_date=date(2024, 1, 2)),
            make_transaction(8, 12, trade_date=date(2024, 1, 3)),
            make_transaction(-6, 15, trade_date=date(2024, 1, 4)),
            make_transaction(4, 11, trade_date=date(2024, 1, 5)),
        ]

        [report] = engine.compute_reports(txns)

        assert sum(lot.remaining_quantity for lot in report.open_lots) == report.remaining_quantity
        assert [lot.remaining_quantity for lot in report.open_lots] == [
            Decimal("7"),
            Decimal("4"),
        ]

    def test_only_buys(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(10, 100, trade_date=date(2024, 1, 2)),
            make_transaction(5, 130, trade_date=date(2024, 1, 3)),
        ]

        [report] = engine.compute_reports(txns)

        assert report.realized_pnl == Decimal("0")
        assert report.avg_sell_price == Decimal("0")
        assert report.sell_quantity == Decimal("0")
        assert report.remaining_quantity == report.buy_quantity == Decimal("15")
        assert report.break_even_price == Decimal("1650") / Decimal("15")

    def test_only_sells(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [make_transaction(-4, 50, trade_date=date(2024, 1, 2))]

        [report] = engine.compute_reports(txns)

        assert report.break_even_price == Decimal("0")
        assert report.realized_pnl == Decimal("0")
        assert report.remaining_quantity == Decimal("-4")
        assert report.is_short
        assert report.unmatched_quantity == Decimal("4")
        kinds = [w.kind for w in report.warnings]
        assert WarningKind.OVERSELL in kinds
        assert WarningKind.SHORT_POSITION in kinds

    def test_fees_are_direction_agnostic(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(10, 100, trade_date=date(2024, 1, 2), fees="-2.00"),
            make_transaction(-5, 110, trade_date=date(2024, 1, 3), fees="1.50"),
            make_transaction(-5, 120, trade_date=date(2024, 1, 4), fees="-0.50"),
        ]

        [report] = engine.compute_reports(txns)

        assert report.total_fees == Decimal("4.00")
        assert report.net_pnl == report.realized_pnl - Decimal("4.00")

    def test_partial_fill_leaves_later_lots_untouched(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(10, 100, trade_date=date(2024, 1, 2)),
            make_transaction(10, 110, trade_date=date(2024, 1, 3)),
            make_transaction(-3, 105, trade_date=date(2024, 1, 4)),
        ]

        [report] = engine.compute_reports(txns)

        assert report.realized_pnl == Decimal("15")
        assert [lot.remaining_quantity for lot in report.open_lots] == [
            Decimal("7"),
            Decimal("10"),
        ]
        assert report.open_lots[1].original_quantity == Decimal("10")

    def test_oversell_only_counts_matched_quantity(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(5, 100, trade_date=date(2024, 1, 2)),
            make_transaction(-8, 90, trade_date=date(2024, 1, 3)),
        ]

        [report] = engine.compute_reports(txns)

        assert report.realized_pnl == Decimal("-50")
        assert report.sell_quantity == Decimal("8")
        assert report.unmatched_quantity == Decimal("3")
        assert report.has_oversell
        oversell = next(w for w in report.warnings if w.kind == WarningKind.OVERSELL)
        assert oversell.quantity == Decimal("3")
        assert oversell.isin == APPLE_ISIN

    def test_zero_quantity_is_an_empty_sell(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(10, 100, trade_date=date(2024, 1, 2)),
            make_transaction(0, 105, trade_date=date(2024, 1, 3), fees="-1"),
        ]

        [report] = engine.compute_reports(txns)

        assert report.sell_quantity == Decimal("0")
        assert report.sell_total == Decimal("0")
        assert report.realized_pnl == Decimal("0")
        assert report.remaining_quantity == Decimal("10")
        assert report.total_fees == Decimal("1")
        assert [w.kind for w in report.warnings] == [WarningKind.ZERO_QUANTITY]

    def test_equal_timestamps_keep_input_order(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(1, 100),
            make_transaction(1, 200),
            make_transaction(-1, 150, trade_time=time(10, 0)),
        ]

        [report] = engine.compute_reports(txns)

        # The first buy in file order is consumed first
        assert report.realized_pnl == Decimal("50")
        assert report.open_lots[0].unit_price == Decimal("200")
        assert [w.kind for w in report.warnings] == [WarningKind.DUPLICATE_TIMESTAMP]

    def test_negative_price_is_flagged_not_rejected(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [make_transaction(1, -5)]

        [report] = engine.compute_reports(txns)

        assert report.buy_quantity == Decimal("1")
        assert [w.kind for w in report.warnings] == [WarningKind.NEGATIVE_PRICE]

    def test_unordered_input_is_sorted_before_matching(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(-15, 120, trade_date=date(2024, 1, 4)),
            make_transaction(10, 110, trade_date=date(2024, 1, 3)),
            make_transaction(10, 100, trade_date=date(2024, 1, 2)),
        ]

        [report] = engine.compute_reports(txns)

        assert report.realized_pnl == Decimal("250")
        assert report.unmatched_quantity == Decimal("0")

    def test_permuted_input_gives_identical_reports(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(10, 100, trade_date=date(2024, 1, 2)),
            make_transaction(3, 95, isin=ASML_ISIN, product="ASML", trade_date=date(2024, 1, 2)),
            make_transaction(10, 110, trade_date=date(2024, 1, 3)),
            make_transaction(-2, 99, isin=ASML_ISIN, product="ASML", trade_date=date(2024, 1, 5)),
            make_transaction(-15, 120, trade_date=date(2024, 1, 4)),
            make_transaction(-5, 125, trade_date=date(2024, 1, 6)),
        ]
        shuffled = list(txns)
        random.Random(7).shuffle(shuffled)

        assert engine.compute_reports(txns) == engine.compute_reports(shuffled)

    def test_reports_sorted_by_product_name(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(1, 10, isin="ISIN-B", product="beta"),
            make_transaction(1, 10, isin="ISIN-Z", product="Zeta"),
            make_transaction(1, 10, isin="ISIN-A", product="Alpha"),
        ]

        reports = engine.compute_reports(txns)

        assert [r.product for r in reports] == ["Alpha", "beta", "Zeta"]

    def test_lower_case_names_sort_among_their_letter(
        self, engine: CostBasisEngine, make_transaction
    ) -> None:
        txns = [
            make_transaction(1, 10, isin="IE00B4L5Y983", product="iShares Core MSCI World"),
            make_transaction(1, 10, isin="US0378331005", product="APPLE INC"),
            make_transaction(1, 10, isin="DE000ZAL1111", product="ZALANDO"),
        ]

        reports = engine.compute_reports(txns)

        assert [r.product for r in reports] == [
            "APPLE INC",
            "iShares Core MSCI World",
            "ZALANDO",
        ]

    def test_names_differing_only_in_case_are_ordered_deterministically(
        self, engine: CostBasisEngine, make_transaction
    ) -> None:
        txns = [
            make_transaction(1, 10, isin="ISIN-2", product="acme"),
            make_transaction(1, 10, isin="ISIN-1", product="ACME"),
        ]

        reports = engine.compute_reports(txns)

        assert [r.product for r in reports] == ["ACME", "acme"]

    def test_product_name_taken_from_earliest_record(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(-1, 10, product="NEW NAME", trade_date=date(2024, 2, 1)),
            make_transaction(1, 10, product="OLD NAME", trade_date=date(2024, 1, 1)),
        ]

        [report] = engine.compute_reports(txns)

        assert report.product == "OLD NAME"

    def test_instruments_do_not_share_lots(self, engine: CostBasisEngine, make_transaction) -> None:
        txns = [
            make_transaction(10, 100, isin=APPLE_ISIN, product="APPLE INC"),
            make_transaction(-5, 50, isin=ASML_ISIN, product="ASML", trade_date=date(2024, 1, 3)),
        ]

        apple, asml = engine.compute_reports(txns)

        assert apple.remaining_quantity == Decimal("10")
        assert asml.realized_pnl == Decimal("0")
        assert asml.unmatched_quantity == Decimal("5")

    def test_empty_input(self, engine: CostBasisEngine) -> None:
        assert engine.compute_reports([]) == []

    def test_module_function_matches_engine(self, make_transaction) -> None:
        txns = [
            make_transaction(10, 100, trade_date=date(2024, 1, 2)),
            make_transaction(-4, 130, trade_date=date(2024, 1, 3)),
        ]

        assert compute_reports(txns) == CostBasisEngine().compute_reports(txns)
