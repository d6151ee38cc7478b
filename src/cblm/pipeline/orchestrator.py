# src/cblm/pipeline/orchestrator.py
# usage:
#   cblm sortedList.json survey1-BLM.csv survey1-CBLM.csv
#   cblm --batch sortedList.json blm_dir/ cblm_dir/ [--input-suffix -BLM.csv --output-suffix -CBLM.csv]
import argparse
import logging
import logging.config
import os
import sys
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from cblm.annotate.annotator import annotate
from cblm.config import Settings
from cblm.errors import CBLMError, MalformedTable
from cblm.evaluation.metrics import report_annotation_metrics
from cblm.grouping.adapters import load_grouping
from cblm.grouping.index import CodeIndex, build_index
from cblm.pipeline.outputs import (
    BatchReport, FileOutcome, derive_output_path, outcome_from_result, summarize_run,
)
from cblm.utils.io import append_row, read_table, write_table

logger = logging.getLogger(__name__)


def setup_logging(level: str):
    level = (level or "INFO").upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "console",
                "stream": "ext://sys.stderr",
            }
        },
        "root": {"level": level, "handlers": ["stderr"]},
    })


def load_index(grouping_path: str, cfg: Settings) -> CodeIndex:
    grouping = load_grouping(grouping_path, encoding=cfg.encoding)
    return build_index(grouping)


def annotate_file(input_path: str, output_path: str, index: CodeIndex, cfg: Settings) -> FileOutcome:
    """Read one BLM, splice in codes, write the CBLM. Fatal errors propagate."""
    table = read_table(input_path, encoding=cfg.encoding)
    result = annotate(
        table, index,
        node_name_col=cfg.node_name_col,
        code_header=cfg.code_header,
        source=input_path,
    )
    write_table(output_path, result.rows, encoding=cfg.encoding)
    report_annotation_metrics(result, code_col=cfg.node_name_col)
    logger.info("Wrote %d rows to %s", len(result.rows), os.path.abspath(output_path))
    return outcome_from_result(input_path, output_path, result)


def discover_inputs(input_dir: str, input_suffix: str, recursive: bool = False) -> List[str]:
    if not os.path.isdir(input_dir):
        raise NotADirectoryError(f"Input directory not found: {input_dir}")
    found = []
    if recursive:
        for root, dirs, files in os.walk(input_dir):
            dirs.sort()
            found.extend(os.path.join(root, f) for f in files if f.endswith(input_suffix))
    else:
        found = [os.path.join(input_dir, f) for f in os.listdir(input_dir)
                 if f.endswith(input_suffix) and os.path.isfile(os.path.join(input_dir, f))]
    return sorted(found)


def _finish(report: BatchReport, index: CodeIndex, cfg: Settings, mode: str, grouping_path: str) -> dict:
    run_id = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H%M%SZ")
    summary = summarize_run(report, index, cfg, run_id=run_id, mode=mode, grouping_path=grouping_path)
    if cfg.run_metrics_csv:
        append_row(cfg.run_metrics_csv, summary)
        logger.info("Appended run summary to %s", os.path.abspath(cfg.run_metrics_csv))
    return summary


def run_single(grouping_path: str, input_path: str, output_path: str,
               cfg: Optional[Settings] = None) -> Tuple[BatchReport, dict]:
    cfg = cfg or Settings()
    index = load_index(grouping_path, cfg)

    report = BatchReport()
    report.add(annotate_file(input_path, output_path, index, cfg))
    return report, _finish(report, index, cfg, "single", grouping_path)


def run_batch(grouping_path: str, input_dir: str, output_dir: str,
              cfg: Optional[Settings] = None) -> Tuple[BatchReport, dict]:
    """
    Annotate every file in `input_dir` ending in `cfg.input_suffix`.

    The grouping is loaded and indexed once, before any table is touched, so
    grouping errors abort the whole batch. A malformed or unreadable table
    only fails its own file; the rest still run.
    """
    cfg = cfg or Settings()
    index = load_index(grouping_path, cfg)

    inputs = discover_inputs(input_dir, cfg.input_suffix, recursive=cfg.recursive)
    os.makedirs(output_dir, exist_ok=True)
    if not inputs:
        logger.warning("No files ending in %r under %s", cfg.input_suffix, input_dir)

    report = BatchReport()
    for input_path in inputs:
        output_path = derive_output_path(input_path, input_dir, output_dir,
                                         cfg.input_suffix, cfg.output_suffix)
        try:
            report.add(annotate_file(input_path, output_path, index, cfg))
        except (MalformedTable, OSError) as e:
            logger.error("Skipping %s: %s", input_path, e)
            report.add(FileOutcome(input_path=input_path, output_path=output_path, error=str(e)))

    logger.info("Batch done: %d/%d files written to %s",
                len(report.succeeded), len(report.outcomes), os.path.abspath(output_dir))
    for failed in report.failed:
        logger.error("Failed: %s (%s)", failed.input_path, failed.error)
    return report, _finish(report, index, cfg, "batch", grouping_path)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="cblm",
        description="Add a code column to Binary Link Matrix (BLM) files using a sort grouping file.",
    )
    ap.add_argument("grouping", help="Grouping JSON (flat {code: [names]} or {'sorted': {...}})")
    ap.add_argument("input", help="BLM file, or a directory of BLM files with --batch")
    ap.add_argument("output", help="CBLM file, or the output directory with --batch")
    ap.add_argument("--batch", action="store_true", help="Treat input/output as directories")
    ap.add_argument("--input-suffix", default=None, help="Batch: input filename suffix (default -BLM.csv)")
    ap.add_argument("--output-suffix", default=None, help="Batch: output filename suffix (default -CBLM.csv)")
    ap.add_argument("--recursive", action="store_true", default=None, help="Batch: also search subdirectories")
    ap.add_argument("--node-name-col", type=int, default=None, help="0-indexed node name column (default 3)")
    ap.add_argument("--code-header", default=None, help="Header cell for the new column (default Code)")
    ap.add_argument("--config", default=None, help="YAML settings file")
    ap.add_argument("--run-metrics-csv", default=None, help="Append a run summary row to this CSV")
    ap.add_argument("--log-level", default=None, help="DEBUG also dumps the code index")
    return ap


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = dict(
        input_suffix=args.input_suffix,
        output_suffix=args.output_suffix,
        recursive=args.recursive,
        node_name_col=args.node_name_col,
        code_header=args.code_header,
        run_metrics_csv=args.run_metrics_csv,
        log_level=args.log_level,
    )
    if args.config:
        return Settings.from_yaml(args.config, **overrides).validated()
    return Settings.from_overrides(**overrides).validated()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = settings_from_args(args)
    except (OSError, ValueError) as e:
        print(f"[error] Could not load settings: {e}", file=sys.stderr)
        return 1
    setup_logging(cfg.log_level)
    logger.debug("Settings: %s", cfg.to_dict())

    try:
        if args.batch:
            report, _ = run_batch(args.grouping, args.input, args.output, cfg)
        else:
            report, _ = run_single(args.grouping, args.input, args.output, cfg)
    except (CBLMError, OSError) as e:
        logger.error("%s", e)
        return 1

    if not report.ok:
        return 1
    print(f"[ok] Wrote {len(report.succeeded)} CBLM file(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
