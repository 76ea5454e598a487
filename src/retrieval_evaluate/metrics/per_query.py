"""
Per-query scoring of a ranked result list against its relevant set.

One pass over the ranking yields average precision, R-Precision and the
11-point interpolated precision/recall curve.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Sequence, Tuple

# Recall levels 0.0, 0.1, ..., 1.0 of the interpolated curve
RECALL_LEVELS: Tuple[float, ...] = tuple(i / 10 for i in range(11))


@dataclass(frozen=True)
class PerQueryMetrics:
    """Effectiveness of one query. Created by score(), never modified."""
    query_id: int
    retrieved_count: int
    relevant_count: int
    retrieved_relevant_count: int
    average_precision: float
    r_precision: float
    precision_at_recall: Tuple[float, ...]

    @property
    def precision(self) -> float:
        """Fraction of retrieved docs that are relevant (0 when nothing retrieved)."""
        if self.retrieved_count == 0:
            return 0.0
        return self.retrieved_relevant_count / self.retrieved_count

    @property
    def recall(self) -> float:
        """Fraction of relevant docs that were retrieved (0 when nothing is relevant)."""
        if self.relevant_count == 0:
            return 0.0
        return self.retrieved_relevant_count / self.relevant_count


def score(
    query_result: Sequence[int],
    relevant_docs: AbstractSet[int],
    query_id: int = 0,
) -> PerQueryMetrics:
    """
    Score a single ranking.

    Args:
        query_result: Doc ids in rank order, best first. Duplicates are
            scored as they appear.
        relevant_docs: Doc ids judged relevant for the query.
        query_id: Carried through to the result.

    Returns:
        PerQueryMetrics for the query.
    """
    relevant_count = len(relevant_docs)
    found = 0
    ap_sum = 0.0
    r_precision = 0.0
    curve = [0.0] * len(RECALL_LEVELS)

    for rank, doc_id in enumerate(query_result):
        if doc_id in relevant_docs:
            found += 1
            ap_sum += found / (rank + 1)

        # Only reached when the ranking is at least relevant_count long
        if relevant_count > 0 and rank == relevant_count - 1:
            r_precision = found / relevant_count

        local_recall = found / relevant_count if relevant_count else 0.0
        local_precision = found / (rank + 1)
        for i, level in enumerate(RECALL_LEVELS):
            if level > local_recall:
                break
            if local_precision > curve[i]:
                curve[i] = local_precision

    average_precision = ap_sum / relevant_count if relevant_count else 0.0

    return PerQueryMetrics(
        query_id=query_id,
        retrieved_count=len(query_result),
        relevant_count=relevant_count,
        retrieved_relevant_count=found,
        average_precision=average_precision,
        r_precision=r_precision,
        precision_at_recall=tuple(curve),
    )
