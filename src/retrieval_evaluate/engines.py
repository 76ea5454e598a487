"""
Retrieval engines scored by the evaluator.

An engine only has to turn a query string into a ranked list of doc ids.
Bm25Engine ranks with rank_bm25 over documents tokenized by one of the
analyzer variants below:

- whitespace: exact whitespace-separated tokens
- standard: lowercased word tokens
- english: standard + English stop words removed + Porter stemming
- english-custom-stopwords: english with a caller supplied stop word list
"""

from __future__ import annotations

import re
import sys
from typing import Dict, FrozenSet, Iterable, List, Optional, Protocol, Sequence

import numpy as np
from nltk.stem.porter import PorterStemmer
from rank_bm25 import BM25Okapi

ANALYZERS = ["whitespace", "standard", "english", "english-custom-stopwords"]
DEFAULT_MAX_RESULTS = 1000

# Default English stop set of Lucene's EnglishAnalyzer
ENGLISH_STOP_WORDS: FrozenSet[str] = frozenset([
    "a", "an", "and", "are", "as", "at", "be", "but", "by", "for", "if", "in",
    "into", "is", "it", "no", "not", "of", "on", "or", "such", "that", "the",
    "their", "then", "there", "these", "they", "this", "to", "was", "will", "with",
])

_WORD_RE = re.compile(r"\w+(?:'\w+)*")


class RetrievalEngine(Protocol):
    def search(self, query: str) -> Sequence[int]:
        """Doc ids for query, best first."""
        ...


class Analyzer:
    """Turns text into index terms. Callable: analyzer(text) -> tokens."""

    def __init__(
        self,
        name: str,
        word_tokens: bool = True,
        lowercase: bool = True,
        stopwords: Optional[Iterable[str]] = None,
        stem: bool = False,
    ):
        self.name = name
        self.word_tokens = word_tokens
        self.lowercase = lowercase
        self.stopwords = frozenset(w.lower() for w in stopwords) if stopwords is not None else frozenset()
        self._stemmer = PorterStemmer() if stem else None

    def __call__(self, text: str) -> List[str]:
        tokens = _WORD_RE.findall(text) if self.word_tokens else text.split()
        if self.lowercase:
            tokens = [t.lower() for t in tokens]
        if self._stemmer is not None:
            # possessive 's is dropped before stop word removal
            tokens = [t[:-2] if t.endswith("'s") else t for t in tokens]
        if self.stopwords:
            tokens = [t for t in tokens if t not in self.stopwords]
        if self._stemmer is not None:
            tokens = [self._stemmer.stem(t) for t in tokens]
        return tokens

    def __repr__(self) -> str:
        return f"Analyzer({self.name!r})"


def make_analyzer(name: str, stopwords: Optional[Iterable[str]] = None) -> Analyzer:
    """
    Create an analyzer variant by name.

    Raises:
        ValueError: Unknown name, or english-custom-stopwords without stopwords.
    """
    if name == "whitespace":
        return Analyzer(name, word_tokens=False, lowercase=False)
    elif name == "standard":
        return Analyzer(name)
    elif name == "english":
        return Analyzer(name, stopwords=ENGLISH_STOP_WORDS, stem=True)
    elif name == "english-custom-stopwords":
        if stopwords is None:
            raise ValueError("Analyzer 'english-custom-stopwords' requires a stop word list")
        return Analyzer(name, stopwords=stopwords, stem=True)
    raise ValueError(f"Unknown analyzer {name!r}. Valid: {', '.join(ANALYZERS)}")


class Bm25Engine:
    """In-memory BM25 ranking over a fixed document collection."""

    def __init__(
        self,
        documents: Dict[int, str],
        analyzer: Analyzer,
        max_results: int = DEFAULT_MAX_RESULTS,
    ):
        self.analyzer = analyzer
        self.max_results = max_results
        self._doc_ids: List[int] = list(documents.keys())
        self._index: Optional[BM25Okapi] = None

        if self._doc_ids:
            print(f"Indexing {len(self._doc_ids)} documents with {analyzer.name} analyzer", file=sys.stderr)
            corpus = [analyzer(text) for text in documents.values()]
            self._index = BM25Okapi(corpus)

    def search(self, query: str) -> List[int]:
        if self._index is None:
            return []
        tokens = self.analyzer(query)
        if not tokens:
            return []

        # every document sharing a term is a hit, whatever the sign of its score
        terms = set(tokens)
        candidates = np.array(
            [i for i, freqs in enumerate(self._index.doc_freqs) if not terms.isdisjoint(freqs)],
            dtype=int,
        )
        if candidates.size == 0:
            return []

        scores = self._index.get_scores(tokens)
        # stable sort keeps collection order among equal scores
        order = candidates[np.argsort(-scores[candidates], kind="stable")]
        return [self._doc_ids[i] for i in order[:self.max_results]]
