"""
Trading212 Export Parser

Reads the Trading212 history CSV and keeps ordinary dividends. The export
carries ISIN and payer name directly and reports the gross total in EUR,
so only the withholding tax needs converting.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from typing import List

from core.config import T212_ACTION_COLUMN, T212_DIVIDEND_ACTION, T212_COLUMNS
from core.models import Dividend, ReferenceData
from dividends.currency import convert_value, ConversionError
from dividends.parsers.base import (
    BrokerRecordSource,
    RowErrors,
    register_parser,
    read_export,
    cell,
)
from dividends.utils.logging_config import setup_logger

logger = setup_logger(__name__)

# Checked in this order; the first missing one is reported
REQUIRED_FIELDS = ('date', 'payer_id', 'name', 'amount', 'tax', 'tax_currency', 'ticker')


@register_parser("trading212")
class Trading212Parser(BrokerRecordSource):
    """Parser for Trading212 account history exports."""

    def __init__(self):
        self.errors = RowErrors(self.broker_name)

    def parse(self, file_content: str, reference_data: ReferenceData) -> List[Dividend]:
        self.errors = RowErrors(self.broker_name)
        logger.debug(f"Parsing Trading212 export ({len(file_content)} characters)")
        df = read_export(file_content, T212_ACTION_COLUMN, name="Trading212 export")

        dividends = []
        for idx, row in df.iterrows():
            if cell(row, T212_ACTION_COLUMN) != T212_DIVIDEND_ACTION:
                continue

            fields = {}
            for field_name in REQUIRED_FIELDS:
                column = T212_COLUMNS[field_name]
                value = cell(row, column)
                if value is None:
                    self.errors.skip(idx, 'missing_field', f"Missing '{column}'")
                    break
                fields[field_name] = value
            else:
                dividend = self._build_dividend(idx, fields, reference_data)
                if dividend is not None:
                    dividends.append(dividend)

        self.errors.log_summary(len(dividends))
        return dividends

    def _build_dividend(self, idx, fields: dict, reference_data: ReferenceData):
        place = reference_data.company_address(fields['ticker'])
        if place is None:
            self.errors.skip(
                idx, 'unknown_ticker',
                f"No address for ISIN {fields['payer_id']}, {fields['ticker']}, {fields['name']}",
                error=True
            )
            return None
        address, country = place

        try:
            tax = convert_value(fields['date'], fields['tax'], fields['tax_currency'], reference_data.rates)
        except ConversionError as e:
            self.errors.skip(
                idx, 'conversion_failed',
                f"Did not find an exchange rate for {fields['tax_currency']}! ({e})",
                error=True
            )
            return None

        return Dividend(
            date=fields['date'],
            payer_id=fields['payer_id'],
            name=fields['name'],
            address=address,
            country=country,
            amount=fields['amount'],
            tax=tax,
        )
