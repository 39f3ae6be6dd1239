"""Result formatting.

Results are printed in one of three modes:
- JSON: pretty-printed with a 2 space indent
- CSV: header plus one row per record, written row by row
- console: a readable structural dump
"""

from __future__ import annotations

import csv
import json
import math
import os
import pprint
from datetime import datetime
from typing import Any, Iterable, TextIO

import click

# Raw bytes32 identifiers kept next to their decoded values
CSV_EXCLUDED_FIELDS = ("fromCurrencyKeyBytes", "toCurrencyKeyBytes")

CSV_DATE_FORMAT = "%a %b %d %Y %H:%M:%S GMT%z"


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return str(value)


def to_json(data: Any) -> str:
    """Serialize results as indented JSON."""
    return json.dumps(data, indent=2, default=_json_default)


def output_json(data: Any) -> None:
    """Output data as JSON."""
    click.echo(to_json(data))


def output_console(data: Any) -> None:
    """Output data in a readable structural form."""
    if isinstance(data, str):
        click.echo(data)
    else:
        click.echo(pprint.pformat(data, sort_dicts=False))


def csv_row(record: dict[str, Any]) -> dict[str, Any]:
    """Prepare a record for CSV: drop raw byte keys, render dates."""
    row = {k: v for k, v in record.items() if k not in CSV_EXCLUDED_FIELDS}
    if isinstance(row.get("date"), datetime):
        row["date"] = row["date"].strftime(CSV_DATE_FORMAT)
    return row


def output_csv(records: Iterable[dict[str, Any]], stream: TextIO | None = None) -> None:
    """Stream records as CSV, columns taken from the first record."""
    stream = stream or click.get_text_stream("stdout")
    writer: csv.DictWriter | None = None

    for record in records:
        row = csv_row(record)
        if writer is None:
            writer = csv.DictWriter(
                stream,
                fieldnames=list(row),
                extrasaction="ignore",
                lineterminator="\n",
            )
            writer.writeheader()
        writer.writerow(row)
        stream.flush()


def log_results(results: Any, as_json: bool = False) -> Any:
    """Print results as JSON or in console form and hand them back."""
    if as_json:
        output_json(results)
    else:
        output_console(results)
    return results


def format_max(max_results: Any) -> str:
    if isinstance(max_results, float) and math.isinf(max_results):
        return "Infinity"
    return str(max_results)


def show_result_count(results: Any, max_results: Any) -> None:
    """With DEBUG set, report how many entries came back."""
    if os.getenv("DEBUG"):
        click.echo(f"{len(results)} entries returned (max supplied: {format_max(max_results)})")
