"""Text and tabular rendering of evaluation results."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

import pandas as pd

from .aggregate import AggregateReport
from .per_query import PerQueryMetrics, RECALL_LEVELS


def format_report(report: AggregateReport) -> str:
    """Render an AggregateReport as plain text, one field per line."""
    lines = [
        f"Number of retrieved documents: {report.total_retrieved}",
        f"Number of relevant documents: {report.total_relevant}",
        f"Number of relevant documents retrieved: {report.total_retrieved_relevant}",
        f"Average precision: {report.mean_precision}",
        f"Average recall: {report.mean_recall}",
        f"F-measure: {report.f_measure}",
        f"MAP: {report.mean_average_precision}",
        f"Average R-Precision: {report.mean_r_precision}",
        "Average precision at recall levels: ",
    ]
    for i, value in enumerate(report.mean_precision_at_recall):
        lines.append(f"\t{i}: {value}")
    return "\n".join(lines)


def report_to_dict(report: AggregateReport) -> Dict[str, object]:
    """Flat dict of the report, curve points keyed as iprec_at_recall_0.00 ... 1.00."""
    row: Dict[str, object] = {
        "num_ret": report.total_retrieved,
        "num_rel": report.total_relevant,
        "num_rel_ret": report.total_retrieved_relevant,
        "P": report.mean_precision,
        "recall": report.mean_recall,
        "F": report.f_measure,
        "map": report.mean_average_precision,
        "Rprec": report.mean_r_precision,
    }
    for level, value in zip(RECALL_LEVELS, report.mean_precision_at_recall):
        row[_curve_column(level)] = value
    return row


def per_query_row(metrics: PerQueryMetrics) -> Dict[str, object]:
    """Table row of one query: counts, measures and curve points."""
    row: Dict[str, object] = {
        "Query": metrics.query_id,
        "Retrieved": metrics.retrieved_count,
        "Relevant": metrics.relevant_count,
        "RelRet": metrics.retrieved_relevant_count,
        "Precision": metrics.precision,
        "Recall": metrics.recall,
        "AP": metrics.average_precision,
        "RPrec": metrics.r_precision,
    }
    for level, value in zip(RECALL_LEVELS, metrics.precision_at_recall):
        row[_curve_column(level)] = value
    return row


def per_query_frame(metrics: Iterable[PerQueryMetrics], digits: int = 4) -> pd.DataFrame:
    """
    One row per query, followed by a MEAN row over numeric measure columns.

    Count columns are left blank in the MEAN row.
    """
    rows = [per_query_row(m) for m in metrics]
    df = pd.DataFrame(rows)
    if df.empty:
        return df

    mean_row: Dict[str, object] = {"Query": "MEAN"}
    for col in df.columns:
        if col == "Query":
            continue
        if col in ("Retrieved", "Relevant", "RelRet"):
            mean_row[col] = ""
        else:
            mean_row[col] = df[col].mean()
    df = pd.concat([df, pd.DataFrame([mean_row])], ignore_index=True)

    measure_cols = [c for c in df.columns if c not in ("Query", "Retrieved", "Relevant", "RelRet")]
    df[measure_cols] = df[measure_cols].astype(float).round(digits)
    return df


def comparison_frame(reports: Mapping[str, AggregateReport], digits: int = 4) -> pd.DataFrame:
    """Side-by-side summary of several runs, one row per run name."""
    rows: List[Dict[str, object]] = []
    for name, report in reports.items():
        row: Dict[str, object] = {"Run": name}
        row.update(report_to_dict(report))
        rows.append(row)
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    float_cols = [c for c in df.columns if c not in ("Run", "num_ret", "num_rel", "num_rel_ret")]
    df[float_cols] = df[float_cols].astype(float).round(digits)
    return df


def _curve_column(level: float) -> str:
    return f"iprec_at_recall_{level:.2f}"
