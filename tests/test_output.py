"""Tests for result formatting."""

import io
import json
import math
from datetime import datetime, timezone

import pytest

from horizon_data.cli.output import (
    csv_row,
    format_max,
    log_results,
    output_console,
    output_csv,
    show_result_count,
    to_json,
)

DATE = datetime(2020, 3, 15, 10, 30, 5, tzinfo=timezone.utc)


@pytest.fixture
def exchange_record():
    return {
        "block": 1001,
        "timestamp": 1584268205000,
        "date": DATE,
        "hash": "0xhash",
        "fromAmountInUSD": 100.0,
        "fromCurrencyKey": "zUSD",
        "fromCurrencyKeyBytes": "0x7a555344",
        "toCurrencyKey": "zBTC",
        "toCurrencyKeyBytes": "0x7a425443",
    }


class TestCsv:
    """Tests for CSV output."""

    def test_drops_byte_fields_and_formats_date(self, exchange_record):
        row = csv_row(exchange_record)

        assert "fromCurrencyKeyBytes" not in row
        assert "toCurrencyKeyBytes" not in row
        assert row["date"] == "Sun Mar 15 2020 10:30:05 GMT+0000"

    def test_header_from_first_record(self, exchange_record):
        stream = io.StringIO()
        output_csv([exchange_record, dict(exchange_record, block=1002)], stream=stream)

        lines = stream.getvalue().splitlines()
        assert lines[0] == "block,timestamp,date,hash,fromAmountInUSD,fromCurrencyKey,toCurrencyKey"
        assert lines[1].startswith("1001,1584268205000,Sun Mar 15 2020")
        assert lines[2].startswith("1002,")
        assert len(lines) == 3

    def test_empty_writes_nothing(self):
        stream = io.StringIO()
        output_csv([], stream=stream)
        assert stream.getvalue() == ""

    def test_accepts_generators(self):
        stream = io.StringIO()
        output_csv(({"label": str(i), "trades": i} for i in range(2)), stream=stream)
        assert stream.getvalue() == "label,trades\n0,0\n1,1\n"


class TestJson:
    """Tests for JSON output."""

    def test_round_trips(self):
        records = [{"address": "0xa", "balanceOf": 1.5}, {"address": "0xb", "balanceOf": 0.0}]
        text = to_json(records)

        assert json.loads(text) == records
        assert text.splitlines()[1] == "  {"

    def test_dates_and_holes(self):
        text = to_json([{"date": DATE}, None])
        assert json.loads(text) == [{"date": "2020-03-15T10:30:05+00:00"}, None]


class TestConsole:
    """Tests for console output and result counts."""

    def test_strings_are_echoed(self, capsys):
        output_console("0xabc")
        assert capsys.readouterr().out == "0xabc\n"

    def test_log_results_as_json(self, capsys):
        results = log_results(["0xa", "0xb"], as_json=True)

        assert results == ["0xa", "0xb"]
        assert json.loads(capsys.readouterr().out) == ["0xa", "0xb"]

    def test_format_max(self):
        assert format_max(math.inf) == "Infinity"
        assert format_max(100) == "100"
        assert format_max("n/a") == "n/a"

    def test_result_count_needs_debug(self, capsys, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        show_result_count([1, 2], math.inf)
        assert capsys.readouterr().out == ""

        monkeypatch.setenv("DEBUG", "1")
        show_result_count([1, 2], math.inf)
        assert capsys.readouterr().out == "2 entries returned (max supplied: Infinity)\n"
