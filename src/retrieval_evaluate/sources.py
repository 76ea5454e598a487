"""
Readers for the evaluation inputs.

Formats:
- queries: <id>\t<query text>, one per line; query ids are 1-based positions
- qrels: <query_id>;<doc_id>,<doc_id>,... (a query may span several lines)
- stopwords: one word per line
- documents: <doc_id>\t<field>\t<field>... (fields joined as document text)
- run: TREC run format, <query_id> Q0 <doc_id> <rank> <score> <tag>
"""

from __future__ import annotations

import sys
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from .judgments import RelevanceJudgments

QUERY_SEPARATOR = "\t"
QREL_SEPARATOR = ";"
DOC_SEPARATOR = ","
DOCUMENT_SEPARATOR = "\t"


class ParseError(ValueError):
    """Raised when an input line cannot be parsed."""

    def __init__(self, path: Path, line_no: int, message: str):
        super().__init__(f"{path}:{line_no}: {message}")
        self.path = path
        self.line_no = line_no


def iter_lines(path: Path) -> Iterator[Tuple[int, str]]:
    """
    Lazily yield (line_number, line) for every non-empty line, stripped.

    Line numbers are 1-based and count blank lines too.
    """
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if line:
                yield line_no, line


def _parse_int(path: Path, line_no: int, value: str, what: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ParseError(path, line_no, f"{what} is not an integer: {value!r}") from None


def read_queries(path: Path) -> List[str]:
    """Read query texts in file order. Position i holds query id i + 1."""
    queries: List[str] = []
    for line_no, line in iter_lines(path):
        parts = line.split(QUERY_SEPARATOR)
        if len(parts) < 2:
            raise ParseError(path, line_no, f"expected '<id>{QUERY_SEPARATOR!r}<query>', got {line!r}")
        queries.append(parts[1])
    print(f"Loaded {len(queries)} queries from {path}", file=sys.stderr)
    return queries


def read_qrels(path: Path) -> RelevanceJudgments:
    """Read relevance judgments."""
    relevant: Dict[int, set] = defaultdict(set)
    for line_no, line in iter_lines(path):
        parts = line.split(QREL_SEPARATOR)
        if len(parts) != 2:
            raise ParseError(path, line_no, f"expected '<query>{QREL_SEPARATOR}<docs>', got {line!r}")
        query_id = _parse_int(path, line_no, parts[0], "query id")
        for doc in parts[1].split(DOC_SEPARATOR):
            relevant[query_id].add(_parse_int(path, line_no, doc, "doc id"))
    return RelevanceJudgments(dict(relevant))


def read_stopwords(path: Path) -> List[str]:
    return [line for _, line in iter_lines(path)]


def read_documents(path: Path) -> Dict[int, str]:
    """Read documents as doc_id -> text. Later duplicates replace earlier ones."""
    documents: Dict[int, str] = {}
    for line_no, line in iter_lines(path):
        parts = line.split(DOCUMENT_SEPARATOR)
        doc_id = _parse_int(path, line_no, parts[0], "doc id")
        documents[doc_id] = " ".join(p.strip() for p in parts[1:])
    print(f"Loaded {len(documents)} documents from {path}", file=sys.stderr)
    return documents


def read_run(path: Path) -> Dict[int, List[int]]:
    """
    Read a TREC run file as query_id -> doc_ids ordered by rank.

    Rows with equal rank keep their file order.
    """
    ranked: Dict[int, List[Tuple[int, int, int]]] = defaultdict(list)
    for line_no, line in iter_lines(path):
        parts = line.split()
        if len(parts) != 6:
            raise ParseError(path, line_no, f"run format expects 6 columns, got {len(parts)}: {line!r}")
        query_id = _parse_int(path, line_no, parts[0], "query id")
        doc_id = _parse_int(path, line_no, parts[2], "doc id")
        rank = _parse_int(path, line_no, parts[3], "rank")
        ranked[query_id].append((rank, line_no, doc_id))

    return {
        query_id: [doc_id for _, _, doc_id in sorted(rows)]
        for query_id, rows in ranked.items()
    }


@dataclass(frozen=True)
class CollectionStats:
    num_queries: int
    num_qrels: int
    avg_relevant_per_query: float


def collection_stats(queries: List[str], judgments: RelevanceJudgments) -> CollectionStats:
    return CollectionStats(
        num_queries=len(queries),
        num_qrels=len(judgments),
        avg_relevant_per_query=judgments.average_relevant(),
    )
