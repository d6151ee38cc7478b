import logging
from typing import Optional

import pandas as pd

from cblm.annotate.annotator import AnnotationResult
from cblm.config import NODE_NAME_COL

logger = logging.getLogger("cblm.metrics")


def code_counts(result: AnnotationResult, code_col: int = NODE_NAME_COL) -> pd.DataFrame:
    """Rows per code in an annotated table; unmatched rows count under ""."""
    codes = pd.Series([row[code_col] for row in result.rows[1:]], dtype="string")
    total = len(codes)
    return (
        codes.value_counts(dropna=False)
        .rename_axis("code").to_frame("n")
        .assign(pct=lambda s: (s["n"] / max(total, 1)).round(4))
        .reset_index()
    )


def report_annotation_metrics(result: AnnotationResult, code_col: int = NODE_NAME_COL,
                              label: Optional[str] = None):
    label = label or result.source or "table"
    total = result.n_data_rows
    if total == 0:
        logger.info("%s: header only; nothing to report.", label)
        return

    n_unmatched = result.n_unmatched
    logger.info("%s: matched %d/%d rows (%.2f%%), unmatched %d",
                label, result.n_matched, total, 100.0 * result.n_matched / max(total, 1), n_unmatched)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s: rows by code:\n%s", label, code_counts(result, code_col).to_string(index=False))

    if n_unmatched:
        distinct = sorted({u.name for u in result.unmatched})
        logger.info("%s: %d distinct unmatched node names (up to 20): %s",
                    label, len(distinct), ", ".join(repr(n) for n in distinct[:20]))
