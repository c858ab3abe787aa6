"""Rendering of per-instrument reports as text or JSON."""

from __future__ import annotations

import json
from collections.abc import Sequence
from decimal import Decimal

from degiro_portfolio.design_system import (
    REPORT_WIDTH,
    colorize,
    format_amount,
    format_quantity,
    get_value_token,
)
from degiro_portfolio.domain.reports import AssetReport, PortfolioSummary


class ReportFormatter:
    """Turns computed reports into display strings.

    Reports are rendered in the order given; nothing is recomputed apart
    from the portfolio totals.
    """

    def __init__(self, currency: str = "EUR", color: bool = True) -> None:
        self._currency = currency
        self._color = color

    def format(self, reports: Sequence[AssetReport]) -> str:
        """Render the full portfolio report."""
        lines: list[str] = []
        lines.extend(self._banner("DEGIRO PORTFOLIO REPORT"))
        lines.append("")

        for report in reports:
            lines.extend(self._format_asset(report))
            lines.append("")

        summary = PortfolioSummary.from_reports(reports)
        lines.extend(self._banner("SUMMARY"))
        lines.append(f"  Total bought:       {self._money(summary.total_bought)}")
        lines.append(f"  Total sold:         {self._money(summary.total_sold)}")
        lines.append(f"  Total fees:         {self._fee(summary.total_fees)}")
        lines.append(f"  Total realized P&L: {self._pnl(summary.total_realized_pnl)}")
        lines.append(f"  Net P&L (w/fees):   {self._pnl(summary.total_net_pnl)}")
        lines.append("")

        return "\n".join(lines)

    def format_open_lots(self, reports: Sequence[AssetReport]) -> str:
        """Render the FIFO lots still open for each instrument."""
        lines: list[str] = []
        lines.extend(self._banner("OPEN LOTS"))
        lines.append("")

        for report in reports:
            if not report.open_lots:
                continue
            lines.append(f"  {report.product}")
            lines.append(f"  ISIN: {report.isin}")
            lines.append("-" * REPORT_WIDTH)
            for lot in report.open_lots:
                acquired = lot.acquired_at.strftime("%Y-%m-%d %H:%M")
                lines.append(
                    f"  {acquired}   {format_quantity(lot.remaining_quantity)} units"
                    f"   @ {self._money(lot.unit_price)}"
                    f"   = {self._money(lot.remaining_cost)}"
                )
            lines.append("")

        return "\n".join(lines)

    def format_json(self, reports: Sequence[AssetReport]) -> str:
        """Render reports and totals as a JSON document."""
        document = {
            "currency": self._currency,
            "reports": [report.to_dict() for report in reports],
            "summary": PortfolioSummary.from_reports(reports).to_dict(),
        }
        return json.dumps(document, indent=2, ensure_ascii=False)

    def _format_asset(self, r: AssetReport) -> list[str]:
        lines = [
            f"  {r.product}",
            f"  ISIN: {r.isin}",
            "-" * REPORT_WIDTH,
            f"  Bought:           {format_quantity(r.buy_quantity)} units"
            f"   @ avg {self._money(r.break_even_price)}   = {self._money(r.buy_total)}",
            f"  Sold:             {format_quantity(r.sell_quantity)} units"
            f"   @ avg {self._money(r.avg_sell_price)}   = {self._money(r.sell_total)}",
            f"  Remaining:        {format_quantity(r.remaining_quantity)} units",
            f"  Break-even price: {self._money(r.break_even_price)}",
            f"  Total fees:       {self._fee(r.total_fees)}",
            f"  Realized P&L:     {self._pnl(r.realized_pnl)}",
            f"  Net P&L (w/fees): {self._pnl(r.net_pnl)}",
        ]
        for warning in r.warnings:
            if warning.kind.is_informational:
                continue
            lines.append(colorize(f"  ! {warning.message}", "warning", self._color))
        return lines

    def _banner(self, title: str) -> list[str]:
        rule = "=" * REPORT_WIDTH
        return [rule, colorize(f"  {title}", "heading", self._color), rule]

    def _money(self, value: Decimal) -> str:
        return f"{format_amount(value)} {self._currency}"

    def _fee(self, value: Decimal) -> str:
        return colorize(self._money(value), "fee", self._color)

    def _pnl(self, value: Decimal) -> str:
        text = f"{format_amount(value, show_sign=True)} {self._currency}"
        return colorize(text, get_value_token(value), self._color)
