"""
DOH-DIV Report Writer

Serializes dividends into the semicolon-delimited import file accepted by
eDavki for the DOH-DIV form (version 3.9).

Layout:
    #FormCode;Version;TaxPayerID;TaxPayerType;DocumentWorkflowID;;;;;;
    DOH-DIV;3.9;<tax id>;FO;O;;;;;;
    #<11 column names>
    DD.MM.YYYY;;<payer id>;<name>;<address>;<country>;1;<amount>;<tax>;<country>;

Each header line is followed by an empty line. Rows keep the order the
dividends were collected in.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from pathlib import Path
from typing import Iterable, Union

from core.config import (
    FORM_METADATA_HEADER,
    FORM_CODE,
    FORM_VERSION,
    TAXPAYER_TYPE,
    DOCUMENT_WORKFLOW_ID,
    COLUMN_HEADER,
    DIVIDEND_TYPE_CODE,
    FIELD_DELIMITER,
    OUTPUT_ENCODING,
)
from core.models import Dividend
from dividends.currency import date_portion
from dividends.utils.logging_config import setup_logger

logger = setup_logger(__name__)


class DateFormatError(ValueError):
    """Raised when a dividend date cannot be written as DD.MM.YYYY."""
    pass


def format_report_date(value: str) -> str:
    """
    Rewrite an ISO date or timestamp as DD.MM.YYYY.

    Example:
        >>> format_report_date("2023-05-09T10:00:00")
        '09.05.2023'
    """
    parts = date_portion(value).split('-')
    if len(parts) != 3 or not all(parts):
        raise DateFormatError(f"Unable to convert date '{value}'")
    return '.'.join(reversed(parts))


def format_amount(value: str) -> str:
    return value.replace('.', ',')


def header_lines(tax_id: str) -> list:
    form_line = FIELD_DELIMITER.join(
        [FORM_CODE, FORM_VERSION, tax_id, TAXPAYER_TYPE, DOCUMENT_WORKFLOW_ID]
    ) + FIELD_DELIMITER * 6
    return [FORM_METADATA_HEADER, "", form_line, "", COLUMN_HEADER, ""]


def format_row(dividend: Dividend) -> str:
    """
    One report line for a dividend.

    Raises:
        DateFormatError: If the dividend date is not YYYY-MM-DD based
    """
    fields = [
        format_report_date(dividend.date),
        "",  # payer tax number, not known for foreign payers
        dividend.payer_id,
        dividend.name,
        dividend.address,
        dividend.country,
        DIVIDEND_TYPE_CODE,
        format_amount(dividend.amount),
        dividend.tax,
        dividend.country,  # source country
        "",  # treaty exemption not claimed
    ]
    return FIELD_DELIMITER.join(fields)


class ReportWriter:
    """Writes the DOH-DIV import file."""

    def __init__(self, output_path: Union[str, Path]):
        self.output_path = Path(output_path)
        self.skipped = 0

    def write(self, tax_id: str, dividends: Iterable[Dividend]) -> int:
        """
        Write the report, replacing any existing file.

        Args:
            tax_id: Filer's tax number, copied verbatim into the header
            dividends: Dividends in report order

        Returns:
            Number of dividend rows written

        Raises:
            OSError: If the output file cannot be created or written
        """
        written = 0
        self.skipped = 0

        with open(self.output_path, 'w', encoding=OUTPUT_ENCODING, newline='\n') as f:
            for line in header_lines(tax_id):
                f.write(line + '\n')

            for dividend in dividends:
                try:
                    row = format_row(dividend)
                except DateFormatError as e:
                    self.skipped += 1
                    logger.error(f"{e} ({dividend.payer_id}, {dividend.name})")
                    continue

                f.write(row + '\n')
                written += 1

        logger.info(f"Wrote {written} dividends to {self.output_path}")
        if self.skipped:
            logger.warning(f"{self.skipped} dividends left out because of invalid dates")

        return written
