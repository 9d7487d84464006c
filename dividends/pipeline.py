# -----------------------------------------------------------------------------
# (c) 2026 Andreas Wagner. All Rights Reserved.
#
# This code is part of the Dividend Report project.
# Unauthorized usage or distribution is not permitted.
# -----------------------------------------------------------------------------

from pathlib import Path
from typing import List, Optional, Tuple

from core.models import Dividend, ReferenceData, RunConfig
from dividends.parsers import get_parser
from dividends.report_writer import ReportWriter
from dividends.utils.logging_config import setup_logger

logger = setup_logger(__name__)


def _sources(config: RunConfig) -> List[Tuple[str, Optional[Path]]]:
    # Report order follows argument order: Revolut first, then Trading212
    return [
        ("revolut", config.revolut_path),
        ("trading212", config.trading212_path),
    ]


def process_dividends(config: RunConfig, reference_data: ReferenceData) -> List[Dividend]:
    """
    Parse every configured broker export into one list of dividends.

    Exports are parsed one after another; the result keeps export order,
    then row order within each export.
    """
    dividends: List[Dividend] = []

    for broker, path in _sources(config):
        if path is None:
            logger.info(f"No {broker} export given, skipping")
            continue

        try:
            file_content = Path(path).read_text(encoding='utf-8-sig')
            parser = get_parser(broker)
            parsed = parser.parse(file_content, reference_data)
        except Exception as e:
            logger.error(f"Failed to process {broker} export {path}: {e}", exc_info=True)
            raise e

        logger.info(f"{broker}: {len(parsed)} dividends from {path}")
        dividends.extend(parsed)

    return dividends


def generate_report(config: RunConfig, reference_data: ReferenceData) -> int:
    """
    Parse all exports and write the DOH-DIV report once.

    Returns:
        Number of dividend rows written
    """
    dividends = process_dividends(config, reference_data)
    writer = ReportWriter(config.output_path)
    return writer.write(config.tax_id, dividends)
