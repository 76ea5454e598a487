"""Score retrieval runs over a fixed query list."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from .engines import RetrievalEngine
from .judgments import RelevanceJudgments
from .metrics import AggregateReport, PerQueryMetrics, RunAccumulator, finalize, fold, score


@dataclass(frozen=True)
class RunEvaluation:
    """Per-query metrics and aggregate report of one run."""
    name: str
    per_query: Tuple[PerQueryMetrics, ...]
    report: AggregateReport


class RunEvaluator:
    """
    Score runs against shared queries and judgments.

    Query ids are 1-based positions in `queries`. Each run gets its own
    accumulator, so evaluators can be reused across runs.
    """

    def __init__(self, queries: Sequence[str], judgments: RelevanceJudgments):
        self.queries = list(queries)
        self.judgments = judgments

    @property
    def query_ids(self) -> List[int]:
        return list(range(1, len(self.queries) + 1))

    def evaluate(self, engine: RetrievalEngine, name: str = "run") -> RunEvaluation:
        """Search every query with engine and score the rankings."""
        rankings = {
            query_id: engine.search(query)
            for query_id, query in zip(self.query_ids, self.queries)
        }
        return self.evaluate_rankings(rankings, name)

    def evaluate_rankings(self, rankings: Mapping[int, Sequence[int]], name: str = "run") -> RunEvaluation:
        """
        Score precomputed rankings keyed by query id.

        Queries without a ranking count as empty results. Rankings for ids
        outside the query list are ignored.
        """
        extra = set(rankings.keys()) - set(self.query_ids)
        if extra:
            print(f"Warning: {name}: ignoring rankings for unknown query ids {sorted(extra)}", file=sys.stderr)

        acc = RunAccumulator.empty()
        per_query: List[PerQueryMetrics] = []
        for query_id in self.query_ids:
            metrics = score(rankings.get(query_id, []), self.judgments.relevant(query_id), query_id)
            per_query.append(metrics)
            acc = fold(acc, metrics)

        return RunEvaluation(
            name=name,
            per_query=tuple(per_query),
            report=finalize(acc, len(self.queries)),
        )

    def evaluate_many(self, engines: Mapping[str, RetrievalEngine]) -> Dict[str, RunEvaluation]:
        """Evaluate each named engine independently, in mapping order."""
        return {name: self.evaluate(engine, name) for name, engine in engines.items()}
