"""CSV parser for DEGIRO "Transactions" exports."""

import csv
import io
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from pathlib import Path

from degiro_portfolio.domain.transactions import Transaction
from degiro_portfolio.domain.value_objects import ZERO
from degiro_portfolio.exceptions import (
    ExportFileNotFoundError,
    InvalidTradeDateError,
    MalformedRowError,
)
from degiro_portfolio.logging_config import get_logger

logger = get_logger(__name__)


def parse_eu_number(raw: str | None) -> Decimal:
    """Parse a European-format number such as ``"1.234,56"``.

    Dots are thousands separators and the comma is the decimal separator.
    Empty or unparseable input yields zero.
    """
    if raw is None or not raw.strip():
        return ZERO

    cleaned = raw.strip().replace(".", "").replace(",", ".", 1)
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        logger.warning("unparseable_number", raw=raw)
        return ZERO

    if not value.is_finite():
        logger.warning("unparseable_number", raw=raw)
        return ZERO
    return value


class DegiroCSVParser:
    """Parser for the DEGIRO transactions export.

    Fields are comma separated; fields that contain commas (European
    decimals) are wrapped in double quotes. The first non-blank line is the
    header.
    """

    # Column positions in the export
    DATE_COLUMN = 0
    TIME_COLUMN = 1
    PRODUCT_COLUMN = 2
    ISIN_COLUMN = 3
    QUANTITY_COLUMN = 6
    PRICE_COLUMN = 7
    VALUE_COLUMN = 11
    FEES_COLUMN = 14
    TOTAL_COLUMN = 15

    # Total EUR is optional; older exports can end at the fees column
    REQUIRED_COLUMNS = FEES_COLUMN + 1

    DEFAULT_DATE_FORMAT = "%d-%m-%Y"
    DEFAULT_TIME_FORMAT = "%H:%M"

    def __init__(
        self,
        date_format: str | None = None,
        time_format: str | None = None,
        encoding: str = "utf-8-sig",
    ) -> None:
        """Initialize the parser.

        Args:
            date_format: strptime format of the Date column.
            time_format: strptime format of the Time column.
            encoding: Encoding of export files read via parse().
        """
        self._date_format = date_format or self.DEFAULT_DATE_FORMAT
        self._time_format = time_format or self.DEFAULT_TIME_FORMAT
        self._encoding = encoding

    def parse(self, file_path: str | Path) -> list[Transaction]:
        """Parse an export file.

        Raises:
            ExportFileNotFoundError: If the file does not exist.
            MalformedRowError: If a row has too few columns.
            InvalidTradeDateError: If a row's date or time cannot be parsed.
        """
        path = Path(file_path)
        if not path.is_file():
            raise ExportFileNotFoundError(str(file_path))

        content = path.read_text(encoding=self._encoding)
        return self.parse_text(content, source=str(path))

    def parse_text(self, content: str, source: str = "<string>") -> list[Transaction]:
        """Parse export content already loaded into memory."""
        transactions: list[Transaction] = []
        header_seen = False

        reader = csv.reader(io.StringIO(content, newline=""))
        for cols in reader:
            if not any(col.strip() for col in cols):
                continue
            if not header_seen:
                header_seen = True
                continue
            transactions.append(self._parse_row(cols, source, reader.line_num))

        logger.info("transactions_parsed", source=source, count=len(transactions))
        return transactions

    def _parse_row(self, cols: list[str], source: str, line_number: int) -> Transaction:
        if len(cols) < self.REQUIRED_COLUMNS:
            raise MalformedRowError(source, line_number, len(cols), self.REQUIRED_COLUMNS)

        return Transaction(
            trade_date=self._parse_date(cols[self.DATE_COLUMN], source, line_number),
            trade_time=self._parse_time(cols[self.TIME_COLUMN], source, line_number),
            product=cols[self.PRODUCT_COLUMN].strip(),
            isin=cols[self.ISIN_COLUMN].strip(),
            quantity=parse_eu_number(cols[self.QUANTITY_COLUMN]),
            price=parse_eu_number(cols[self.PRICE_COLUMN]),
            value=parse_eu_number(cols[self.VALUE_COLUMN]),
            fees=parse_eu_number(cols[self.FEES_COLUMN]),
            total=self._optional_number(cols, self.TOTAL_COLUMN),
        )

    @staticmethod
    def _optional_number(cols: list[str], index: int) -> Decimal:
        if index >= len(cols):
            return ZERO
        return parse_eu_number(cols[index])

    def _parse_date(self, raw: str, source: str, line_number: int) -> date:
        try:
            return datetime.strptime(raw.strip(), self._date_format).date()
        except ValueError as e:
            raise InvalidTradeDateError(source, line_number, raw) from e

    def _parse_time(self, raw: str, source: str, line_number: int) -> time:
        try:
            return datetime.strptime(raw.strip(), self._time_format).time()
        except ValueError as e:
            raise InvalidTradeDateError(source, line_number, raw) from e
