"""
Dividend Report Configuration

Fixed file names, DOH-DIV form constants and broker export column names.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

# Reference files, resolved against the data directory
PLACES_FILE = "places.json"
BROKER_ALIAS_FILE = "revolut.json"
RATES_FILE = "rates.xml"

# Output
OUTPUT_FILE = "result.csv"
OUTPUT_ENCODING = "utf-8"

# DOH-DIV form (eDavki)
FORM_CODE = "DOH-DIV"
FORM_VERSION = "3.9"
TAXPAYER_TYPE = "FO"
DOCUMENT_WORKFLOW_ID = "O"
DIVIDEND_TYPE_CODE = "1"
FIELD_DELIMITER = ";"

FORM_METADATA_HEADER = "#FormCode;Version;TaxPayerID;TaxPayerType;DocumentWorkflowID;;;;;;"

COLUMN_HEADER = (
    "#datum prejema dividende;"
    "davčna številka izplačevalca dividend;"
    "identifikacijska  številka izplačevalca dividend;"
    "naziv izplačevalca dividend;"
    "naslov izplačevalca dividend;"
    "država izplačevalca dividend;"
    "vrsta dividende;"
    "znesek dividend;"
    "tuji davek;"
    "država vira;"
    "uveljavljam oprostitev po mednarodni pogodbi"
)

# Rate table
BASE_CURRENCY = "EUR"
ZERO_TAX = "0.00"

# Trading212 export
T212_ACTION_COLUMN = "Action"
T212_DIVIDEND_ACTION = "Dividend (Ordinary)"
T212_COLUMNS = {
    'date': "Time",
    'payer_id': "ISIN",
    'name': "Name",
    'amount': "Total",
    'tax': "Withholding tax",
    'tax_currency': "Currency (Withholding tax)",
    'ticker': "Ticker",
}

# Revolut export
REVOLUT_TYPE_COLUMN = "Type"
REVOLUT_DIVIDEND_TYPE = "DIVIDEND"
REVOLUT_CURRENCY = "USD"
REVOLUT_COLUMNS = {
    'date': "Date",
    'ticker': "Ticker",
    'amount': "Total Amount",
}
