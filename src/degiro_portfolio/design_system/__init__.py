"""Terminal design system for the DEGIRO portfolio report.

Usage:
    from degiro_portfolio.design_system import colorize, format_amount

    print(colorize(format_amount(250, show_sign=True), "gain"))  # +250.00
"""

from degiro_portfolio.design_system.components import (
    colorize,
    format_amount,
    format_quantity,
    get_value_token,
)
from degiro_portfolio.design_system.tokens import (
    ANSI_COLORS,
    REPORT_WIDTH,
    RESET,
    SEMANTIC_COLORS,
)

__all__ = [
    "ANSI_COLORS",
    "REPORT_WIDTH",
    "RESET",
    "SEMANTIC_COLORS",
    "colorize",
    "format_amount",
    "format_quantity",
    "get_value_token",
]
