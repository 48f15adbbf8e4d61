"""
Store output formats for the show command.

Renders the record store as a console table, JSON or CSV.
"""

import csv
import io
import json
from typing import Sequence

from ..records import FIELDS, Record


def format_store_json(records: Sequence[Record]) -> str:
    return json.dumps([record.to_dict() for record in records], indent=2, ensure_ascii=False)


def format_store_csv(records: Sequence[Record]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(FIELDS)
    for record in records:
        row = record.to_dict()
        writer.writerow(["" if row[name] is None else row[name] for name in FIELDS])
    return buffer.getvalue()


def format_store_console(records: Sequence[Record]) -> str:
    """
    Format the store as a fixed-width table

    Args:
        records: Records in store order

    Returns:
        Table text with a header and a record count footer
    """
    rows = [
        (
            record.cashtag or "-",
            record.contract_address or "-",
            record.timestamp or "-",
        )
        for record in records
    ]
    headers = ("CASHTAG", "CONTRACT ADDRESS", "FIRST SEEN")
    widths = [
        max([len(headers[i])] + [len(row[i]) for row in rows])
        for i in range(len(headers))
    ]

    def line(values):
        return "  ".join(value.ljust(width) for value, width in zip(values, widths)).rstrip()

    lines = [line(headers), line(["-" * width for width in widths])]
    lines.extend(line(row) for row in rows)
    lines.append("")
    lines.append(f"{len(rows)} record(s)")
    return "\n".join(lines)
