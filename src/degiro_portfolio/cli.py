"""Command-line interface for the DEGIRO portfolio report."""

import argparse
import sys
from typing import Any

from pydantic import ValidationError

from degiro_portfolio import __version__
from degiro_portfolio.config import LogLevel, Settings
from degiro_portfolio.container import Container
from degiro_portfolio.domain.reports import AssetReport
from degiro_portfolio.exceptions import ConfigurationError, DegiroReportError
from degiro_portfolio.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def build_settings(args: argparse.Namespace) -> Settings:
    """Build settings from the environment, overridden by command line options."""
    overrides: dict[str, Any] = {}
    if getattr(args, "log_level", None):
        overrides["log_level"] = args.log_level
    if getattr(args, "no_color", False):
        overrides["color_output"] = False
    if getattr(args, "currency", None):
        overrides["reporting_currency"] = args.currency

    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.errors()[0]['msg']}",
            context={"overrides": {k: str(v) for k, v in overrides.items()}},
        ) from e


def load_reports(container: Container, file: str) -> list[AssetReport]:
    """Parse an export and compute its FIFO reports."""
    transactions = container.parser.parse(file)
    reports = container.engine.compute_reports(transactions)
    logger.info(
        "report_generated",
        file=file,
        transactions=len(transactions),
        instruments=len(reports),
    )
    return reports


def cmd_report(args: argparse.Namespace, container: Container) -> int:
    """Print the portfolio report for a transactions export."""
    reports = load_reports(container, args.file)

    if args.format == "json":
        print(container.formatter.format_json(reports))
    else:
        print(container.formatter.format(reports))
    return 0


def cmd_lots(args: argparse.Namespace, container: Container) -> int:
    """Print the FIFO lots still open after all sells."""
    reports = load_reports(container, args.file)
    print(container.formatter.format_open_lots(reports))
    return 0


def cmd_version(args: argparse.Namespace, container: Container) -> int:
    """Show version information."""
    print(f"DEGIRO Portfolio Report v{__version__}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="degiro-report",
        description="DEGIRO portfolio report - FIFO cost basis and realized P&L per asset",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=None,
        help="Log level for diagnostics written to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # report command
    report_parser = subparsers.add_parser(
        "report", help="Show cost basis and P&L per asset"
    )
    report_parser.add_argument("file", help="DEGIRO Transactions CSV export")
    report_parser.add_argument(
        "--format",
        "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    report_parser.add_argument(
        "--currency",
        default=None,
        help="Label of the reporting currency (default: EUR)",
    )
    report_parser.add_argument(
        "--no-color", action="store_true", help="Disable colored output"
    )
    report_parser.set_defaults(func=cmd_report)

    # lots command
    lots_parser = subparsers.add_parser("lots", help="Show open FIFO lots per asset")
    lots_parser.add_argument("file", help="DEGIRO Transactions CSV export")
    lots_parser.add_argument(
        "--currency",
        default=None,
        help="Label of the reporting currency (default: EUR)",
    )
    lots_parser.add_argument(
        "--no-color", action="store_true", help="Disable colored output"
    )
    lots_parser.set_defaults(func=cmd_lots)

    # version command
    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = build_settings(args)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    configure_logging(settings)

    try:
        result: int = args.func(args, Container(settings))
    except DegiroReportError as e:
        logger.error("command_failed", error_code=e.error_code, context=e.context)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    return result


if __name__ == "__main__":
    sys.exit(main())
