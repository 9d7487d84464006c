"""
Dividends Package

Normalization and conversion pipeline for the DOH-DIV dividend report.

Modules:
- currency: Withholding tax / amount conversion to EUR
- reference_data: Place directory, broker aliases and rate table loaders
- parsers: Broker export parsers (Trading212, Revolut)
- report_writer: DOH-DIV file serialization
- pipeline: Runs the parsers and the writer for one filing

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['currency', 'reference_data', 'parsers', 'report_writer', 'pipeline']
