from degiro_portfolio.domain.reports import AssetReport, PortfolioSummary
from degiro_portfolio.domain.transactions import (
    InsufficientQuantityError,
    LotMatch,
    OpenLot,
    Transaction,
)
from degiro_portfolio.domain.value_objects import (
    ZERO,
    MatchingWarning,
    TradeSide,
    WarningKind,
)

__all__ = [
    "AssetReport",
    "InsufficientQuantityError",
    "LotMatch",
    "MatchingWarning",
    "OpenLot",
    "PortfolioSummary",
    "TradeSide",
    "Transaction",
    "WarningKind",
    "ZERO",
]
