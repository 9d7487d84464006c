"""
Broker export parsers.

Importing this package registers every parser with the registry in
``dividends.parsers.base``.
"""

from dividends.parsers.base import BrokerRecordSource, get_parser, list_available_parsers
from dividends.parsers.revolut_parser import RevolutParser
from dividends.parsers.trading212_parser import Trading212Parser

__all__ = ['BrokerRecordSource', 'get_parser', 'list_available_parsers', 'RevolutParser', 'Trading212Parser']
