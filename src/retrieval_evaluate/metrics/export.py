"""
Write evaluation results to measure files.

Supported formats:
- trec_eval: measure query_id value (3 cols, run name from filename)
- ir_measures: run query_id measure value (4 cols)
- jsonl: JSON lines with run, query_id, measure, value fields (nan as null)

Aggregate values use the reserved query id "all".
"""

from __future__ import annotations

import json
import math
import sys
from pathlib import Path
from typing import Iterable, List, Literal, Tuple

from .aggregate import AggregateReport
from .per_query import PerQueryMetrics, RECALL_LEVELS
from .report import report_to_dict

Format = Literal["trec_eval", "ir_measures", "jsonl"]
FORMATS = ["trec_eval", "ir_measures", "jsonl"]

# Reserved query id for aggregate rows
ALL_QUERY_ID = "all"

# (query_id, measure, value)
MeasureRow = Tuple[str, str, float]


def measure_rows(
    per_query: Iterable[PerQueryMetrics],
    report: AggregateReport | None = None,
) -> List[MeasureRow]:
    """Flatten per-query metrics (and optionally the report) into measure rows."""
    rows: List[MeasureRow] = []
    for m in per_query:
        qid = str(m.query_id)
        rows.append((qid, "num_ret", m.retrieved_count))
        rows.append((qid, "num_rel", m.relevant_count))
        rows.append((qid, "num_rel_ret", m.retrieved_relevant_count))
        rows.append((qid, "P", m.precision))
        rows.append((qid, "recall", m.recall))
        rows.append((qid, "map", m.average_precision))
        rows.append((qid, "Rprec", m.r_precision))
        for level, value in zip(RECALL_LEVELS, m.precision_at_recall):
            rows.append((qid, f"iprec_at_recall_{level:.2f}", value))

    if report is not None:
        for measure, value in report_to_dict(report).items():
            rows.append((ALL_QUERY_ID, measure, value))
    return rows


def write_measures(
    path: Path,
    run_name: str,
    per_query: Iterable[PerQueryMetrics],
    report: AggregateReport | None = None,
    format: Format = "trec_eval",
) -> None:
    """Write measure rows for one run to path."""
    lines = [_format_row(run_name, row, format) for row in measure_rows(per_query, report)]

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    print(f"Wrote {len(lines)} entries to {path}", file=sys.stderr)


def _format_row(run_name: str, row: MeasureRow, format: Format) -> str:
    query_id, measure, value = row

    if format == "trec_eval":
        # Note: run name not included in trec_eval format
        return f"{measure}\t{query_id}\t{value}"

    elif format == "ir_measures":
        return f"{run_name}\t{query_id}\t{measure}\t{value}"

    elif format == "jsonl":
        return json.dumps({
            "run": run_name,
            "query_id": query_id,
            "measure": measure,
            "value": None if isinstance(value, float) and math.isnan(value) else value,
        })

    else:
        raise ValueError(f"Unknown format: {format!r}")
