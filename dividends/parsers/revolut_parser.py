"""
Revolut Export Parser

Reads the Revolut trading statement CSV and keeps dividend rows.

Revolut amounts are USD with a '$' prefix and already net of US
withholding, and the export has no ISIN or payer name: both come from the
broker alias directory keyed by ticker.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from typing import List

from core.config import (
    REVOLUT_TYPE_COLUMN,
    REVOLUT_DIVIDEND_TYPE,
    REVOLUT_CURRENCY,
    REVOLUT_COLUMNS,
    ZERO_TAX,
)
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


def strip_dollar(amount: str) -> str:
    """Drop the '$' Revolut puts on USD amounts: '$12.30' -> '12.30'."""
    return amount.replace('$', '')


@register_parser("revolut")
class RevolutParser(BrokerRecordSource):
    """Parser for Revolut trading account statements."""

    def __init__(self):
        self.errors = RowErrors(self.broker_name)

    def parse(self, file_content: str, reference_data: ReferenceData) -> List[Dividend]:
        self.errors = RowErrors(self.broker_name)
        logger.debug(f"Parsing Revolut export ({len(file_content)} characters)")
        df = read_export(file_content, REVOLUT_TYPE_COLUMN, name="Revolut export")

        date_column = REVOLUT_COLUMNS['date']
        ticker_column = REVOLUT_COLUMNS['ticker']
        amount_column = REVOLUT_COLUMNS['amount']

        dividends = []
        for idx, row in df.iterrows():
            if cell(row, REVOLUT_TYPE_COLUMN) != REVOLUT_DIVIDEND_TYPE:
                continue

            date = cell(row, date_column)
            if date is None:
                self.errors.skip(idx, 'missing_field', "Missing dividend date", error=True)
                continue

            ticker = cell(row, ticker_column)
            if ticker is None:
                self.errors.skip(idx, 'missing_field', f"Missing ticker ({date})", error=True)
                continue

            place = reference_data.company_address(ticker)
            if place is None:
                self.errors.skip(idx, 'unknown_ticker', f"No address for {ticker}", error=True)
                continue
            address, country = place

            amount = cell(row, amount_column)
            if amount is None:
                self.errors.skip(idx, 'missing_field', f"Missing amount for {ticker} ({date})", error=True)
                continue

            try:
                amount = convert_value(date, strip_dollar(amount), REVOLUT_CURRENCY, reference_data.rates)
            except ConversionError as e:
                self.errors.skip(
                    idx, 'conversion_failed',
                    f"Unable to convert value for {ticker} ({date}): {e}",
                    error=True
                )
                continue

            alias = reference_data.broker_alias(ticker)
            if alias is None:
                self.errors.skip(idx, 'unknown_alias', f"Missing revolut definition for {ticker}", error=True)
                continue
            payer_id, name = alias

            dividends.append(Dividend(
                date=date,
                payer_id=payer_id,
                name=name,
                address=address,
                country=country,
                amount=amount,
                tax=ZERO_TAX,
            ))

        self.errors.log_summary(len(dividends))
        return dividends
