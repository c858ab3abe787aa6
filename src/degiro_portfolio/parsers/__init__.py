"""File parsers for importing brokerage transaction exports."""

from degiro_portfolio.parsers.degiro_csv_parser import DegiroCSVParser, parse_eu_number

__all__ = [
    "DegiroCSVParser",
    "parse_eu_number",
]
