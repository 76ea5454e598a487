"""
Effectiveness metrics for ranked retrieval.

Components:
- per_query: score one ranking against its relevant set
- aggregate: fold per-query metrics into a macro-averaged report
- report: text and tabular rendering
- export: measure files (trec_eval, ir_measures, jsonl)
"""

from .per_query import PerQueryMetrics, RECALL_LEVELS, score
from .aggregate import AggregateReport, RunAccumulator, aggregate, finalize, fold, f_measure
from .report import format_report, per_query_frame, comparison_frame, report_to_dict
from .export import write_measures, ALL_QUERY_ID

__all__ = [
    "PerQueryMetrics",
    "RECALL_LEVELS",
    "score",
    "AggregateReport",
    "RunAccumulator",
    "aggregate",
    "finalize",
    "fold",
    "f_measure",
    "format_report",
    "per_query_frame",
    "comparison_frame",
    "report_to_dict",
    "write_measures",
    "ALL_QUERY_ID",
]
