"""
CSV Export - spreadsheet-friendly rendering of the sales grid
"""
import csv
import io
from typing import Any, Iterable, List, Sequence

BOM = "\ufeff"


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def render_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """
    UTF-8 BOM, CRLF, every cell quoted. The sale id goes out as ="..." so
    Excel keeps the long id as text instead of a rounded number.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow([_cell(h) for h in headers])

    for row in rows:
        cells: List[str] = [_cell(v) for v in row]
        if cells and cells[0] != "":
            cells[0] = f'="{cells[0]}"'
        writer.writerow(cells)

    return BOM + output.getvalue()


def csv_filename(date_from, date_to) -> str:
    return f"orders_{date_from}_{date_to}.csv"
