# src/cblm/annotate/annotator.py
"""
Row annotation: splice each node's code into its BLM row.

The code cell goes in at 0-indexed position `node_name_col`, i.e. directly
in front of the node name, so the header reads ``..., Code, <name col>, ...``
and every cell from the node name onwards moves one column to the right.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence

from cblm.config import CODE_HEADER, NODE_NAME_COL
from cblm.errors import MalformedTable

logger = logging.getLogger(__name__)

UNMATCHED_CODE = ""


@dataclass(frozen=True)
class UnmatchedNode:
    row: int
    name: str


@dataclass
class AnnotationResult:
    rows: List[List[str]]
    unmatched: List[UnmatchedNode] = field(default_factory=list)
    source: Optional[str] = None

    @property
    def n_data_rows(self) -> int:
        return max(len(self.rows) - 1, 0)

    @property
    def n_unmatched(self) -> int:
        return len(self.unmatched)

    @property
    def n_matched(self) -> int:
        return self.n_data_rows - self.n_unmatched


def splice(row: Sequence[str], pos: int, cell: str) -> List[str]:
    return [*row[:pos], cell, *row[pos:]]


def annotate(
    table: Sequence[Sequence[str]],
    index: Mapping[str, str],
    *,
    node_name_col: int = NODE_NAME_COL,
    code_header: str = CODE_HEADER,
    source: Optional[str] = None,
) -> AnnotationResult:
    """
    Return a copy of `table` with one code cell spliced into every row.

    Row 0 is treated as the header and gets `code_header`. For each data row
    the cell at `node_name_col` is looked up in `index` by exact string
    equality. Names without a code get an empty cell and a warning; they
    never stop the run.

    Raises MalformedTable if there is no header row or any row has fewer
    than `node_name_col + 1` cells.
    """
    if node_name_col < 0:
        raise ValueError(f"node_name_col must be >= 0, got {node_name_col}")
    if not table:
        raise MalformedTable("no header row", source=source)

    min_cols = node_name_col + 1
    for i, row in enumerate(table):
        if len(row) < min_cols:
            raise MalformedTable(
                f"expected at least {min_cols} columns, found {len(row)}", source=source, row=i
            )

    header, *data = table
    out = [splice(header, node_name_col, code_header)]
    unmatched: List[UnmatchedNode] = []

    for i, row in enumerate(data, start=1):
        name = row[node_name_col]
        code = index.get(name)
        if code is None:
            unmatched.append(UnmatchedNode(row=i, name=name))
            logger.warning("%sNo code for node %r (row %d)",
                           f"{source}: " if source else "", name, i)
            code = UNMATCHED_CODE
        out.append(splice(row, node_name_col, code))

    return AnnotationResult(rows=out, unmatched=unmatched, source=source)
