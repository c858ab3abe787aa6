"""Design tokens for terminal output.

Design tokens are the atomic values that define the visual language of the
report. Colors are ANSI SGR escape sequences keyed by their meaning, so the
formatter never hard-codes an escape code.
"""

from typing import Final

# =============================================================================
# ANSI escape sequences
# =============================================================================

RESET: Final[str] = "\033[0m"

ANSI_COLORS: Final[dict[str, str]] = {
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "magenta": "\033[35m",
    "bold": "\033[1m",
}

# =============================================================================
# Semantic Colors
# =============================================================================

SEMANTIC_COLORS: Final[dict[str, str]] = {
    "gain": ANSI_COLORS["green"],
    "loss": ANSI_COLORS["red"],
    "fee": ANSI_COLORS["yellow"],
    "warning": ANSI_COLORS["magenta"],
    "heading": ANSI_COLORS["bold"],
}

# =============================================================================
# Layout
# =============================================================================

REPORT_WIDTH: Final[int] = 80
