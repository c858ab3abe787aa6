"""Formatting helpers for report values.

Provides number formatting and color markup shared by the report
formatter and the command line.
"""

from decimal import ROUND_HALF_UP, Decimal

from degiro_portfolio.design_system.tokens import RESET, SEMANTIC_COLORS

CENT = Decimal("0.01")


def colorize(text: str, token: str, enabled: bool = True) -> str:
    """Wrap text in the ANSI sequence of a semantic color token.

    Args:
        text: Text to color
        token: Key of SEMANTIC_COLORS (gain, loss, fee, warning, heading)
        enabled: When False the text is returned unchanged

    Returns:
        Colored text
    """
    if not enabled:
        return text
    return f"{SEMANTIC_COLORS[token]}{text}{RESET}"


def format_amount(value: Decimal | int, show_sign: bool = False) -> str:
    """Format a monetary value with thousands separators and two decimals.

    Args:
        value: Amount to format
        show_sign: Prefix non-negative values with "+"

    Returns:
        Formatted amount, e.g. "1,234.56" or "+250.00"
    """
    amount = Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    formatted = f"{abs(amount):,.2f}"

    if amount < 0:
        return f"-{formatted}"
    if show_sign:
        return f"+{formatted}"
    return formatted


def format_quantity(value: Decimal | int) -> str:
    """Format a unit quantity without trailing zeros ("10", "2.5")."""
    quantity = Decimal(value)
    if quantity == quantity.to_integral_value():
        return f"{quantity.to_integral_value():f}"
    return f"{quantity.normalize():f}"


def get_value_token(value: Decimal | int) -> str:
    """Get the color token for a profit or loss value.

    Zero counts as a gain.
    """
    return "gain" if value >= 0 else "loss"
