import csv
import json
import os
from typing import Any, List, Sequence

from cblm.errors import MalformedTable

TSV_SEP = "\t"

Table = List[List[str]]


def load_json(path: str, encoding: str = "utf-8") -> Any:
    with open(path, "r", encoding=encoding) as f:
        return json.load(f)


def read_table(path: str, encoding: str = "utf-8") -> Table:
    """
    Read a tab-separated, unquoted table into a list of rows of strings.

    Row 0 is the header. Every cell is kept verbatim (no NA parsing, no
    quote handling) and every row keeps its own length, so ragged rows
    reach the annotator as they are on disk. A blank line is a row with a
    single empty cell. Raises MalformedTable for an empty file or text that
    isn't valid in `encoding`.
    """
    try:
        with open(path, "r", newline="", encoding=encoding) as f:
            r = csv.reader(f, delimiter=TSV_SEP, quoting=csv.QUOTE_NONE)
            rows = [row or [""] for row in r]
    except UnicodeDecodeError as e:
        raise MalformedTable(f"not valid {encoding} text ({e})", source=path) from e
    except csv.Error as e:
        raise MalformedTable(f"could not parse table ({e})", source=path) from e

    if not rows:
        raise MalformedTable("empty file, no header row", source=path)
    return rows


def write_table(path: str, rows: Sequence[Sequence[str]], encoding: str = "utf-8") -> None:
    """Write rows tab-separated and unquoted, "\\n" line endings, no index column."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="", encoding=encoding) as f:
        w = csv.writer(f, delimiter=TSV_SEP, quoting=csv.QUOTE_NONE, quotechar=None, lineterminator="\n")
        w.writerows(rows)


def append_row(path: str, row: dict):
    write_header = not os.path.exists(path) or os.path.getsize(path) == 0
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=list(row.keys()))
        if write_header:
            w.writeheader()
        w.writerow(row)
