"""
Dividend Report (DOH-DIV)

Builds the eDavki DOH-DIV import file from broker dividend exports.

Usage:
    python dividend_report.py <revolut.csv> [trading212.csv]

Reads places.json, revolut.json and rates.xml from the current directory
and writes result.csv. The tax number is asked for on standard input.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import sys
from pathlib import Path
from typing import List, Optional, TextIO

from core.config import OUTPUT_FILE
from core.models import RunConfig
from dividends.pipeline import generate_report
from dividends.reference_data import load_reference_data
from dividends.utils.logging_config import setup_logger

logger = setup_logger(__name__)

USAGE = "Usage: python dividend_report.py <revolut.csv> [trading212.csv]"


def read_tax_id(stream: TextIO) -> str:
    """Prompt for the filer's tax number and return it trimmed."""
    logger.info("Enter your tax id: ")
    return stream.readline().strip()


def build_config(args: List[str], tax_id: str, data_dir: Path = Path(".")) -> RunConfig:
    """
    Turn positional arguments into a RunConfig.

    Raises:
        ValueError: If the Revolut export path is missing
    """
    if not args:
        raise ValueError("Missing path to the Revolut export")

    return RunConfig(
        tax_id=tax_id,
        revolut_path=Path(args[0]),
        trading212_path=Path(args[1]) if len(args) > 1 else None,
        data_dir=data_dir,
        output_path=data_dir / OUTPUT_FILE,
    )


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    """Run the report. Returns the process exit status."""
    args = sys.argv[1:] if argv is None else argv

    if not args:
        print(USAGE)
        return 1

    tax_id = read_tax_id(stdin or sys.stdin)

    try:
        config = build_config(args, tax_id)
        reference_data = load_reference_data(config.data_dir)
        written = generate_report(config, reference_data)
    except (OSError, ValueError) as e:
        logger.error(f"Report generation failed: {e}", exc_info=True)
        return 1

    logger.info(f"Done: {written} dividends in {config.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
