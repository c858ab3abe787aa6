"""Dependency container for the DEGIRO portfolio report.

Builds the parser, engine and formatter from one Settings instance so the
command line and tests share the same wiring.

Usage:
    from degiro_portfolio.container import Container

    container = Container()
    transactions = container.parser.parse("Transactions.csv")
    reports = container.engine.compute_reports(transactions)
    print(container.formatter.format(reports))
"""

from functools import cached_property

from degiro_portfolio.config import Settings, get_settings
from degiro_portfolio.logging_config import get_logger
from degiro_portfolio.parsers.degiro_csv_parser import DegiroCSVParser
from degiro_portfolio.services.cost_basis import CostBasisEngine
from degiro_portfolio.services.report_formatter import ReportFormatter

logger = get_logger(__name__)


class Container:
    """Lazily constructed application services.

    The container can be configured with custom settings for testing:

        container = Container(settings=Settings(color_output=False))
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        logger.debug(
            "container_created",
            environment=self._settings.environment.value,
            currency=self._settings.reporting_currency,
        )

    @property
    def settings(self) -> Settings:
        """Get application settings."""
        return self._settings

    @cached_property
    def parser(self) -> DegiroCSVParser:
        """Get the transactions export parser."""
        return DegiroCSVParser(
            date_format=self._settings.date_format,
            time_format=self._settings.time_format,
            encoding=self._settings.csv_encoding,
        )

    @cached_property
    def engine(self) -> CostBasisEngine:
        """Get the FIFO cost-basis engine."""
        return CostBasisEngine()

    @cached_property
    def formatter(self) -> ReportFormatter:
        """Get the report formatter."""
        return ReportFormatter(
            currency=self._settings.reporting_currency,
            color=self._settings.color_output,
        )
