from degiro_portfolio.domain.reports import AssetReport, PortfolioSummary
from degiro_portfolio.domain.transactions import LotMatch, OpenLot, Transaction
from degiro_portfolio.domain.value_objects import MatchingWarning, TradeSide, WarningKind
from degiro_portfolio.services.cost_basis import CostBasisEngine, compute_reports

__all__ = [
    "AssetReport",
    "CostBasisEngine",
    "LotMatch",
    "MatchingWarning",
    "OpenLot",
    "PortfolioSummary",
    "TradeSide",
    "Transaction",
    "WarningKind",
    "compute_reports",
]

__version__ = "0.1.0"
