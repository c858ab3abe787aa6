"""Service layer: FIFO cost-basis matching and report rendering."""

from degiro_portfolio.services.cost_basis import (
    CostBasisEngine,
    LotQueue,
    compute_reports,
    group_by_instrument,
    sort_chronologically,
)
from degiro_portfolio.services.report_formatter import ReportFormatter

__all__ = [
    "CostBasisEngine",
    "LotQueue",
    "ReportFormatter",
    "compute_reports",
    "group_by_instrument",
    "sort_chronologically",
]
