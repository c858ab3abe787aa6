"""Exception hierarchy for the DEGIRO portfolio report.

All application exceptions inherit from DegiroReportError so the command
line can catch them with a single base class while preserving specificity.

The cost-basis engine itself raises none of these; anomalies found while
matching lots are reported as MatchingWarning values instead.
"""

from typing import Any


class DegiroReportError(Exception):
    """Base exception for all DEGIRO portfolio report errors.

    Includes an error_code for machine-readable output and extra context.
    """

    error_code: str = "DEGIRO_REPORT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for JSON output."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Ingestion Errors
# =============================================================================


class ParseError(DegiroReportError):
    """Base exception for errors reading a transactions export."""

    error_code = "PARSE_ERROR"


class ExportFileNotFoundError(ParseError):
    """Raised when the transactions export file does not exist."""

    error_code = "EXPORT_FILE_NOT_FOUND"

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"Transactions export not found: {file_path}",
            context={"file_path": file_path},
        )


class MalformedRowError(ParseError):
    """Raised when a row has fewer columns than the export layout requires."""

    error_code = "MALFORMED_ROW"

    def __init__(self, source: str, line_number: int, columns: int, required: int) -> None:
        super().__init__(
            f"{source}:{line_number}: expected at least {required} columns, "
            f"found {columns}",
            context={
                "source": source,
                "line_number": line_number,
                "columns": columns,
                "required": required,
            },
        )


class InvalidTradeDateError(ParseError):
    """Raised when a row's trade date or time cannot be parsed."""

    error_code = "INVALID_TRADE_DATE"

    def __init__(self, source: str, line_number: int, value: str) -> None:
        super().__init__(
            f"{source}:{line_number}: invalid trade date/time {value!r}",
            context={"source": source, "line_number": line_number, "value": value},
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DegiroReportError):
    """Raised when settings or command line options are inconsistent."""

    error_code = "CONFIGURATION_ERROR"
