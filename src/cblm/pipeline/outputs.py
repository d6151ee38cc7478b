import json
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from cblm.annotate.annotator import AnnotationResult
from cblm.config import Settings
from cblm.grouping.index import CodeIndex

# ---------- Output naming ----------
def derive_output_name(name: str, input_suffix: str, output_suffix: str) -> str:
    """
    "survey1-BLM.csv" -> "survey1-CBLM.csv". Only a trailing `input_suffix`
    is replaced; anything else is a caller error.
    """
    if not input_suffix or not name.endswith(input_suffix):
        raise ValueError(f"{name!r} does not end with {input_suffix!r}")
    return name[: -len(input_suffix)] + output_suffix


def derive_output_path(input_path: str, input_dir: str, output_dir: str,
                       input_suffix: str, output_suffix: str) -> str:
    """Same path relative to `input_dir`, rooted at `output_dir`, suffix swapped."""
    rel = os.path.relpath(input_path, input_dir)
    head, tail = os.path.split(rel)
    return os.path.join(output_dir, head, derive_output_name(tail, input_suffix, output_suffix))


# ---------- Run bookkeeping ----------
@dataclass
class FileOutcome:
    input_path: str
    output_path: str
    n_rows: int = 0
    n_unmatched: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchReport:
    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def succeeded(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def add(self, outcome: FileOutcome) -> FileOutcome:
        self.outcomes.append(outcome)
        return outcome


def outcome_from_result(input_path: str, output_path: str, result: AnnotationResult) -> FileOutcome:
    return FileOutcome(
        input_path=input_path,
        output_path=output_path,
        n_rows=result.n_data_rows,
        n_unmatched=result.n_unmatched,
    )


def summarize_run(report: BatchReport, index: CodeIndex, cfg: Settings, *,
                  run_id: str, mode: str, grouping_path: str) -> dict:
    done = report.succeeded
    n_rows = sum(o.n_rows for o in done)
    n_unmatched = sum(o.n_unmatched for o in done)
    failures: List[Tuple[str, str]] = [(o.input_path, o.error or "") for o in report.failed]
    return {
        "run_id": run_id,
        "mode": mode,
        "grouping_file": grouping_path,
        "node_name_col": cfg.node_name_col,
        "index_size": len(index),
        "n_reassigned_names": len(index.duplicates),
        "n_files": len(report.outcomes),
        "n_files_failed": len(failures),
        "n_rows": n_rows,
        "n_rows_unmatched": n_unmatched,
        "rate_matched": (n_rows - n_unmatched) / n_rows if n_rows else 0.0,
        "failures_json": json.dumps(failures, ensure_ascii=False),
    }
