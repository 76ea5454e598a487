"""
Corpus-level aggregation of per-query metrics.

The running totals live in an immutable RunAccumulator value that is
threaded through a left fold:

    acc = RunAccumulator.empty()
    for m in per_query:
        acc = fold(acc, m)
    report = finalize(acc, query_count)

or simply aggregate(per_query, query_count). Averages are macro-averages
over queries, not micro-averages over documents.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Tuple

from .per_query import PerQueryMetrics, RECALL_LEVELS


@dataclass(frozen=True)
class AggregateReport:
    """Macro-averaged effectiveness of one run."""
    total_retrieved: int
    total_relevant: int
    total_retrieved_relevant: int
    mean_precision: float
    mean_recall: float
    f_measure: float
    mean_average_precision: float
    mean_r_precision: float
    mean_precision_at_recall: Tuple[float, ...]


@dataclass(frozen=True)
class RunAccumulator:
    """Running sums over the queries folded so far."""
    queries_folded: int
    total_retrieved: int
    total_relevant: int
    total_retrieved_relevant: int
    precision_sum: float
    recall_sum: float
    average_precision_sum: float
    r_precision_sum: float
    precision_at_recall_sum: Tuple[float, ...]

    @classmethod
    def empty(cls) -> "RunAccumulator":
        return cls(
            queries_folded=0,
            total_retrieved=0,
            total_relevant=0,
            total_retrieved_relevant=0,
            precision_sum=0.0,
            recall_sum=0.0,
            average_precision_sum=0.0,
            r_precision_sum=0.0,
            precision_at_recall_sum=(0.0,) * len(RECALL_LEVELS),
        )


def fold(acc: RunAccumulator, metrics: PerQueryMetrics) -> RunAccumulator:
    """Return a new accumulator with one more query added."""
    return RunAccumulator(
        queries_folded=acc.queries_folded + 1,
        total_retrieved=acc.total_retrieved + metrics.retrieved_count,
        total_relevant=acc.total_relevant + metrics.relevant_count,
        total_retrieved_relevant=acc.total_retrieved_relevant + metrics.retrieved_relevant_count,
        precision_sum=acc.precision_sum + metrics.precision,
        recall_sum=acc.recall_sum + metrics.recall,
        average_precision_sum=acc.average_precision_sum + metrics.average_precision,
        r_precision_sum=acc.r_precision_sum + metrics.r_precision,
        precision_at_recall_sum=tuple(
            s + p for s, p in zip(acc.precision_at_recall_sum, metrics.precision_at_recall)
        ),
    )


def f_measure(precision: float, recall: float) -> float:
    """
    Harmonic mean of precision and recall.

    Undefined (nan) when both are zero. The nan is propagated, not clamped to 0.
    """
    denominator = precision + recall
    if denominator == 0:
        return float("nan")
    return 2 * precision * recall / denominator


def finalize(acc: RunAccumulator, query_count: int) -> AggregateReport:
    """
    Macro-average the accumulated sums over query_count queries.

    query_count is the size of the query list, which includes queries that
    were folded with empty results. Passing 0 raises ZeroDivisionError.
    """
    mean_precision = acc.precision_sum / query_count
    mean_recall = acc.recall_sum / query_count

    return AggregateReport(
        total_retrieved=acc.total_retrieved,
        total_relevant=acc.total_relevant,
        total_retrieved_relevant=acc.total_retrieved_relevant,
        mean_precision=mean_precision,
        mean_recall=mean_recall,
        f_measure=f_measure(mean_precision, mean_recall),
        mean_average_precision=acc.average_precision_sum / query_count,
        mean_r_precision=acc.r_precision_sum / query_count,
        mean_precision_at_recall=tuple(s / query_count for s in acc.precision_at_recall_sum),
    )


def aggregate(metrics: Iterable[PerQueryMetrics], query_count: int) -> AggregateReport:
    """Fold all per-query metrics and finalize in one call."""
    return finalize(reduce(fold, metrics, RunAccumulator.empty()), query_count)
