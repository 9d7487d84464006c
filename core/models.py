"""
Dividend Report Data Models

Defines the data structures shared by every stage of the report:
- Dividend: canonical record every broker export is normalized into
- ReferenceData: place directory, broker alias directory and rate table
- RunConfig: per-run values gathered once at the command line boundary

Amounts stay formatted strings end to end. Only the currency converter
turns them into numbers, and only for the duration of one conversion.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Optional, Dict, Tuple

from pydantic import BaseModel, ConfigDict

from core.config import OUTPUT_FILE

# ticker -> (address, country)
PlaceDirectory = Dict[str, Tuple[str, str]]
# ticker -> (payer id, payer name)
BrokerAliasDirectory = Dict[str, Tuple[str, str]]
# date -> currency code -> units of currency per 1 EUR
RateTable = Dict[str, Dict[str, Decimal]]


class Dividend(BaseModel):
    """
    One dividend payment, normalized for the DOH-DIV report.

    Immutable once constructed. ``amount`` keeps the source's decimal
    convention, ``tax`` is always EUR with a decimal comma.
    """

    model_config = ConfigDict(frozen=True)

    date: str
    payer_id: str
    name: str
    address: str
    country: str
    amount: str
    tax: str


@dataclass(frozen=True)
class ReferenceData:
    """Read-only lookup tables loaded once per run."""

    places: PlaceDirectory = field(default_factory=dict)
    broker_aliases: BrokerAliasDirectory = field(default_factory=dict)
    rates: RateTable = field(default_factory=dict)

    def company_address(self, ticker: str) -> Optional[Tuple[str, str]]:
        """(address, country) for a ticker, or None if it is not listed."""
        return self.places.get(ticker)

    def broker_alias(self, ticker: str) -> Optional[Tuple[str, str]]:
        """(payer id, name) for a ticker, or None if it is not listed."""
        return self.broker_aliases.get(ticker)


@dataclass(frozen=True)
class RunConfig:
    """Everything a single run needs from the outside world."""

    tax_id: str
    revolut_path: Path
    trading212_path: Optional[Path] = None
    data_dir: Path = Path(".")
    output_path: Path = Path(OUTPUT_FILE)
