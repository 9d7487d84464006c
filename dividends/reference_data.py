"""
Reference Data Loaders

Loads the static lookup tables the report needs:
- places.json: ticker -> [address, country]
- revolut.json: ticker -> [ISIN, payer name] for exports without ISINs
- rates.xml: Bank of Slovenia reference rates (tečajnica), one
  <tecajnica datum="YYYY-MM-DD"> per day with <tecaj oznaka="USD">1.0666</tecaj>
  children giving units of each currency per 1 EUR

Any problem with these files is fatal: the report cannot be trusted
without them.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import xml.etree.ElementTree as ET
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from core.config import PLACES_FILE, BROKER_ALIAS_FILE, RATES_FILE
from core.models import ReferenceData, PlaceDirectory, BrokerAliasDirectory, RateTable
from dividends.utils.logging_config import setup_logger

logger = setup_logger(__name__)

_DIRECTORY_ADAPTER = TypeAdapter(Dict[str, Tuple[str, str]])

DAY_TAG = "tecajnica"
RATE_TAG = "tecaj"
DATE_ATTRIBUTE = "datum"
CURRENCY_ATTRIBUTE = "oznaka"


def _local_name(tag: str) -> str:
    """Strip an XML namespace: '{http://www.bsi.si}tecaj' -> 'tecaj'."""
    return tag.rsplit('}', 1)[-1]


def parse_directory(content: Union[str, bytes], name: str = "directory") -> Dict[str, Tuple[str, str]]:
    """
    Validate a ticker directory JSON document.

    Raises:
        ValueError: If the document is not a JSON object of two-element string lists
    """
    try:
        return _DIRECTORY_ADAPTER.validate_json(content)
    except ValidationError as e:
        raise ValueError(f"Malformed {name}: {e}") from e


def load_places(path: Union[str, Path]) -> PlaceDirectory:
    """Load the ticker -> (address, country) directory."""
    places = parse_directory(Path(path).read_bytes(), name=str(path))
    logger.info(f"Loaded {len(places)} payer addresses from {path}")
    return places


def load_broker_aliases(path: Union[str, Path]) -> BrokerAliasDirectory:
    """Load the ticker -> (payer id, name) directory."""
    aliases = parse_directory(Path(path).read_bytes(), name=str(path))
    logger.info(f"Loaded {len(aliases)} broker aliases from {path}")
    return aliases


def _parse_rate(value: str, currency: str, day: str) -> Decimal:
    try:
        rate = Decimal((value or '').strip())
    except InvalidOperation:
        raise ValueError(f"Invalid {currency} rate on {day}: '{value}'")

    if not rate.is_finite() or rate <= 0:
        raise ValueError(f"Invalid {currency} rate on {day}: '{value}'")

    return rate


def parse_rates(content: Union[str, bytes]) -> RateTable:
    """
    Parse a tečajnica XML document into a rate table.

    Namespaces are ignored, so both the plain and the
    xmlns="http://www.bsi.si" variants are accepted.

    Raises:
        ValueError: On XML syntax errors, missing attributes or invalid rates
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ValueError(f"Malformed rate table XML: {e}") from e

    rates: RateTable = {}
    for day in root.iter():
        if _local_name(day.tag) != DAY_TAG:
            continue

        day_key = day.attrib.get(DATE_ATTRIBUTE)
        if not day_key:
            raise ValueError(f"Rate table entry without '{DATE_ATTRIBUTE}' attribute")

        day_rates = rates.setdefault(day_key, {})
        for entry in day:
            if _local_name(entry.tag) != RATE_TAG:
                continue
            currency = entry.attrib.get(CURRENCY_ATTRIBUTE)
            if not currency:
                raise ValueError(f"Rate on {day_key} without '{CURRENCY_ATTRIBUTE}' attribute")
            day_rates[currency] = _parse_rate(entry.text, currency, day_key)

    return rates


def load_rates(path: Union[str, Path]) -> RateTable:
    """Load the rate table from disk."""
    rates = parse_rates(Path(path).read_bytes())
    logger.info(f"Loaded exchange rates for {len(rates)} days from {path}")
    return rates


def load_reference_data(data_dir: Union[str, Path] = ".") -> ReferenceData:
    """
    Load places, broker aliases and rates from a data directory.

    Args:
        data_dir: Directory holding places.json, revolut.json and rates.xml

    Returns:
        ReferenceData bundle shared by all parsers
    """
    data_dir = Path(data_dir)

    logger.info("Loading addresses")
    places = load_places(data_dir / PLACES_FILE)
    broker_aliases = load_broker_aliases(data_dir / BROKER_ALIAS_FILE)
    logger.info("Loading rates")
    rates = load_rates(data_dir / RATES_FILE)

    return ReferenceData(places=places, broker_aliases=broker_aliases, rates=rates)
