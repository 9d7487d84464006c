"""
Broker Export Parser Base

Defines the interface every broker export parser implements, the parser
registry, and the helpers the parsers share:
- read_export: load an export into a string-typed DataFrame
- cell: fetch a field, distinguishing "missing" from "empty"
- record_widths: raw field count per record, for spotting short rows
- RowErrors: per-row diagnostics with category counters

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import csv
from abc import ABC, abstractmethod
from io import StringIO
from typing import List, Dict, Type, Optional
import pandas as pd

from core.models import Dividend, ReferenceData
from dividends.utils.logging_config import setup_logger, log_dataframe_info

logger = setup_logger(__name__)


class BrokerRecordSource(ABC):
    """
    A broker export format.

    Implementations turn one export file into canonical Dividend records,
    skipping (and reporting) rows they cannot resolve.
    """

    broker_name: str = "unknown"

    @abstractmethod
    def parse(self, file_content: str, reference_data: ReferenceData) -> List[Dividend]:
        """
        Parse an export into dividends, in source row order.

        Args:
            file_content: Raw CSV content as string
            reference_data: Places, broker aliases and rates

        Returns:
            List of Dividend records

        Raises:
            ValueError: If the export header is missing or unusable
        """
        pass


class RowErrors:
    """Collects row-level diagnostics for one parse run."""

    CATEGORIES = ('missing_field', 'unknown_ticker', 'conversion_failed', 'unknown_alias')

    def __init__(self, broker_name: str):
        self.broker_name = broker_name
        self.messages: List[str] = []
        self.categories: Dict[str, int] = {category: 0 for category in self.CATEGORIES}

    def __len__(self) -> int:
        return len(self.messages)

    def skip(self, row_idx, category: str, message: str, error: bool = False):
        """Record a skipped row and log it."""
        entry = f"Row {row_idx}: {message}"
        self.messages.append(entry)
        self.categories[category] = self.categories.get(category, 0) + 1
        if error:
            logger.error(f"[{self.broker_name}] {entry}")
        else:
            logger.warning(f"[{self.broker_name}] {entry}")

    def log_summary(self, parsed: int):
        logger.info(f"{self.broker_name} parsing complete: {parsed} dividends, {len(self.messages)} skipped rows")
        for category, count in self.categories.items():
            if count > 0:
                logger.info(f"  - {category}: {count}")


def read_export(file_content: str, discriminator: str, name: str = "Export") -> pd.DataFrame:
    """
    Read a broker CSV export with every cell as a string.

    Empty cells stay '' so that only absent columns and short rows count as
    missing: cells past the end of a short row are set to None.

    Raises:
        ValueError: If the header cannot be read or lacks the discriminator column
    """
    df = pd.read_csv(
        StringIO(file_content),
        quotechar='"',
        dtype=str,  # Keep amounts exactly as exported
        keep_default_na=False,
        on_bad_lines='warn'
    )

    df.columns = df.columns.str.strip()
    log_dataframe_info(logger, df, name)

    if discriminator not in df.columns:
        error_msg = f"{name}: missing required column '{discriminator}'"
        logger.error(error_msg)
        raise ValueError(error_msg)

    _blank_short_rows(df, record_widths(file_content, len(df.columns)), name)
    return df


def record_widths(file_content: str, header_width: int) -> List[int]:
    """
    Field count of every data record, in the order pandas keeps them.

    Blank lines and records wider than the header are left out, as
    read_csv skips the former and drops the latter as bad lines.
    """
    reader = csv.reader(StringIO(file_content), quotechar='"')
    widths = []
    header_seen = False
    for record in reader:
        if not record:
            continue
        if not header_seen:
            header_seen = True
            continue
        if len(record) > header_width:
            continue
        widths.append(len(record))
    return widths


def _blank_short_rows(df: pd.DataFrame, widths: List[int], name: str):
    """Mark the cells a short row never had as missing (read_csv pads them with '')."""
    if len(widths) != len(df):
        logger.warning(f"{name}: could not match {len(df)} rows to raw records, short rows not detected")
        return

    for position, width in enumerate(widths):
        if width < len(df.columns):
            logger.debug(f"{name}: row {df.index[position]} has {width} of {len(df.columns)} fields")
            df.iloc[position, width:] = None


def cell(row: pd.Series, column: str) -> Optional[str]:
    """Value of a column in a row, or None if the row does not carry it."""
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    return str(value)


# Registry of available parsers
_PARSER_REGISTRY: Dict[str, Type[BrokerRecordSource]] = {}


def register_parser(broker_name: str):
    """
    Decorator to register a broker parser class.

    Usage:
        @register_parser("revolut")
        class RevolutParser(BrokerRecordSource):
            ...
    """
    def decorator(cls: Type[BrokerRecordSource]):
        _PARSER_REGISTRY[broker_name.lower()] = cls
        cls.broker_name = broker_name.lower()
        return cls
    return decorator


def get_parser(broker_name: str) -> BrokerRecordSource:
    """
    Factory method to get a parser instance.

    Raises:
        ValueError: If the broker is not supported
    """
    name = broker_name.lower()

    if name not in _PARSER_REGISTRY:
        available = ", ".join(sorted(_PARSER_REGISTRY.keys()))
        raise ValueError(
            f"Parser for '{broker_name}' not found. "
            f"Available: {available}"
        )

    return _PARSER_REGISTRY[name]()


def list_available_parsers() -> List[str]:
    """Names of all registered broker parsers."""
    return sorted(_PARSER_REGISTRY.keys())
