"""
Integration Tests for the Dividend Report

Tests end-to-end workflows:
1. Trading212 export -> report row with EUR withholding tax
2. Revolut export -> USD amount converted with the day's rate
3. Rows with missing columns or unknown tickers are dropped, run completes
4. Command line entry point: argument handling, tax id prompt, exit codes

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import io
import json
import pytest
from decimal import Decimal
from pathlib import Path

import dividend_report
from core.models import ReferenceData, RunConfig
from dividends.pipeline import process_dividends, generate_report


T212_HEADER = (
    "Action,Time,ISIN,Ticker,Name,No. of shares,Price / share,Currency (Price / share),"
    "Exchange rate,Total,Currency (Total),Withholding tax,Currency (Withholding tax)"
)
REVOLUT_HEADER = "Date,Ticker,Type,Quantity,Price per share,Total Amount,Currency,FX Rate"

RATES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<DtecBS xmlns="http://www.bsi.si">
  <tecajnica datum="2023-01-02">
    <tecaj oznaka="USD" sifra="840">1.05</tecaj>
  </tecajnica>
</DtecBS>
"""


@pytest.fixture
def reference_data():
    return ReferenceData(
        places={
            "AAPL": ("One Apple Park Way, Cupertino", "US"),
            "SAP": ("Dietmar-Hopp-Allee 16, Walldorf", "DE"),
        },
        broker_aliases={"AAPL": ("US0378331005", "Apple Inc.")},
        rates={"2023-01-02": {"USD": Decimal("1.05")}},
    )


def write_csv(path: Path, *lines: str) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def report_rows(path: Path) -> list:
    """Dividend rows of a written report (everything after the header block)."""
    return path.read_text(encoding="utf-8").splitlines()[6:]


class TestEndToEndScenarios:

    def test_trading212_eur_tax(self, tmp_path, reference_data):
        """Scenario 1: ordinary dividend, EUR tax 12.34 -> one row with tax 12,34."""
        revolut = write_csv(tmp_path / "revolut.csv", REVOLUT_HEADER)
        t212 = write_csv(
            tmp_path / "t212.csv",
            T212_HEADER,
            "Dividend (Ordinary),2023-05-18 10:00:00,DE0007164600,SAP,SAP SE,20,2.05,EUR,1,41.00,EUR,12.34,EUR",
        )
        config = RunConfig(
            tax_id="12345678",
            revolut_path=revolut,
            trading212_path=t212,
            output_path=tmp_path / "result.csv",
        )

        written = generate_report(config, reference_data)

        assert written == 1
        rows = report_rows(config.output_path)
        assert rows == ["18.05.2023;;DE0007164600;SAP SE;Dietmar-Hopp-Allee 16, Walldorf;DE;1;41,00;12,34;DE;"]
        assert rows[0].split(";")[8] == "12,34"

    def test_revolut_usd_amount(self, tmp_path, reference_data):
        """Scenario 2: $100.00 on 2023-01-02 with USD 1.05 -> 100.00 * 1.05 = 105,00."""
        revolut = write_csv(
            tmp_path / "revolut.csv",
            REVOLUT_HEADER,
            "2023-01-02T14:30:00.000Z,AAPL,DIVIDEND,,,$100.00,USD,1.05",
        )
        config = RunConfig(tax_id="12345678", revolut_path=revolut, output_path=tmp_path / "result.csv")

        generate_report(config, reference_data)

        fields = report_rows(config.output_path)[0].split(";")
        expected = (Decimal("100.00") * Decimal("1.05")).quantize(Decimal("0.01"))
        assert fields[7] == str(expected).replace(".", ",") == "105,00"
        assert fields[8] == "0.00"
        assert fields[0] == "02.01.2023"

    def test_missing_ticker_column(self, tmp_path, reference_data):
        """Scenario 3: no ticker column -> zero rows, run completes, one diagnostic."""
        revolut = write_csv(tmp_path / "revolut.csv", REVOLUT_HEADER)
        t212 = write_csv(
            tmp_path / "t212.csv",
            "Action,Time,ISIN,Name,Total,Withholding tax,Currency (Withholding tax)",
            "Dividend (Ordinary),2023-05-18 10:00:00,DE0007164600,SAP SE,41.00,12.34,EUR",
        )
        config = RunConfig(
            tax_id="12345678",
            revolut_path=revolut,
            trading212_path=t212,
            output_path=tmp_path / "result.csv",
        )

        assert generate_report(config, reference_data) == 0
        assert report_rows(config.output_path) == []

    def test_unknown_ticker_dropped(self, tmp_path, reference_data):
        """Scenario 4: unknown ticker dropped, remaining rows still reported."""
        revolut = write_csv(
            tmp_path / "revolut.csv",
            REVOLUT_HEADER,
            "2023-01-02T14:30:00.000Z,KO,DIVIDEND,,,$4.60,USD,1.05",
            "2023-01-02T14:30:00.000Z,AAPL,DIVIDEND,,,$2.00,USD,1.05",
        )
        config = RunConfig(tax_id="12345678", revolut_path=revolut, output_path=tmp_path / "result.csv")

        dividends = process_dividends(config, reference_data)

        assert [d.payer_id for d in dividends] == ["US0378331005"]
        assert dividends[0].amount == "2,10"

    def test_revolut_rows_come_first(self, tmp_path, reference_data):
        revolut = write_csv(
            tmp_path / "revolut.csv",
            REVOLUT_HEADER,
            "2023-01-02T14:30:00.000Z,AAPL,DIVIDEND,,,$2.00,USD,1.05",
        )
        t212 = write_csv(
            tmp_path / "t212.csv",
            T212_HEADER,
            "Dividend (Ordinary),2023-05-18 10:00:00,DE0007164600,SAP,SAP SE,20,2.05,EUR,1,41.00,EUR,12.34,EUR",
            "Dividend (Ordinary),2023-01-02 10:00:00,US0378331005,AAPL,Apple Inc.,1,0.23,USD,1.07,0.21,EUR,0.03,EUR",
        )
        config = RunConfig(tax_id="1", revolut_path=revolut, trading212_path=t212)

        dividends = process_dividends(config, reference_data)

        assert [d.date for d in dividends] == [
            "2023-01-02T14:30:00.000Z",
            "2023-05-18 10:00:00",
            "2023-01-02 10:00:00",
        ]

    def test_missing_export_is_fatal(self, tmp_path, reference_data):
        config = RunConfig(tax_id="1", revolut_path=tmp_path / "nope.csv")

        with pytest.raises(OSError):
            process_dividends(config, reference_data)


class TestCommandLine:

    @pytest.fixture
    def workdir(self, tmp_path, monkeypatch):
        places = {"AAPL": ["One Apple Park Way, Cupertino", "US"]}
        aliases = {"AAPL": ["US0378331005", "Apple Inc."]}
        (tmp_path / "places.json").write_text(json.dumps(places), encoding="utf-8")
        (tmp_path / "revolut.json").write_text(json.dumps(aliases), encoding="utf-8")
        (tmp_path / "rates.xml").write_bytes(RATES_XML.encode("utf-8"))
        write_csv(
            tmp_path / "revolut.csv",
            REVOLUT_HEADER,
            "2023-01-02T14:30:00.000Z,AAPL,DIVIDEND,,,$100.00,USD,1.05",
        )
        monkeypatch.chdir(tmp_path)
        return tmp_path

    def test_full_run(self, workdir):
        status = dividend_report.main(["revolut.csv"], stdin=io.StringIO("  12345678 \n"))

        assert status == 0
        lines = (workdir / "result.csv").read_text(encoding="utf-8").splitlines()
        assert lines[2] == "DOH-DIV;3.9;12345678;FO;O;;;;;;"
        assert lines[6] == "02.01.2023;;US0378331005;Apple Inc.;One Apple Park Way, Cupertino;US;1;105,00;0.00;US;"

    def test_no_arguments_is_usage_error(self, workdir, capsys):
        assert dividend_report.main([], stdin=io.StringIO("1\n")) == 1
        assert "Usage" in capsys.readouterr().out
        assert not (workdir / "result.csv").exists()

    def test_missing_second_export_is_fatal(self, workdir):
        status = dividend_report.main(["revolut.csv", "t212.csv"], stdin=io.StringIO("1\n"))
        assert status == 1

    def test_malformed_reference_data_is_fatal(self, workdir):
        (workdir / "places.json").write_text("{not json", encoding="utf-8")

        assert dividend_report.main(["revolut.csv"], stdin=io.StringIO("1\n")) == 1

    def test_build_config(self):
        config = dividend_report.build_config(["r.csv", "t.csv"], "42")

        assert config.revolut_path == Path("r.csv")
        assert config.trading212_path == Path("t.csv")
        assert config.tax_id == "42"

    def test_build_config_requires_revolut_export(self):
        with pytest.raises(ValueError):
            dividend_report.build_config([], "42")
