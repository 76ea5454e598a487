"""
Relevance judgments - immutable lookup from query id to relevant doc ids.

Query ids are 1-based positions in the query list. A query without any
judgment simply has no relevant documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Tuple


@dataclass(frozen=True, eq=False)
class RelevanceJudgments:
    """
    Read-only container of qrels: query_id -> frozenset of doc_ids.

    Build once per evaluation (see sources.read_qrels or from_pairs) and
    share freely; nothing mutates it afterwards.
    """
    _relevant: Mapping[int, FrozenSet[int]] = field(default_factory=dict)

    def __post_init__(self):
        frozen = {int(q): frozenset(docs) for q, docs in self._relevant.items()}
        object.__setattr__(self, "_relevant", MappingProxyType(frozen))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, int]]) -> "RelevanceJudgments":
        """Create judgments from (query_id, doc_id) pairs."""
        grouped: Dict[int, set] = {}
        for query_id, doc_id in pairs:
            grouped.setdefault(query_id, set()).add(doc_id)
        return cls(grouped)

    def relevant(self, query_id: int) -> FrozenSet[int]:
        """Relevant doc_ids for a query, empty if the query was never judged."""
        return self._relevant.get(query_id, frozenset())

    @property
    def query_ids(self) -> FrozenSet[int]:
        return frozenset(self._relevant.keys())

    def average_relevant(self) -> float:
        """Mean number of relevant documents per judged query."""
        if not self._relevant:
            return 0.0
        return sum(len(docs) for docs in self._relevant.values()) / len(self._relevant)

    def __len__(self) -> int:
        return len(self._relevant)

    def __contains__(self, query_id: object) -> bool:
        return query_id in self._relevant
