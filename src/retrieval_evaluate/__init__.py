"""
retrieval_evaluate - Effectiveness evaluation of ranked document retrieval.

Provides:
- judgments.py: RelevanceJudgments lookup
- metrics/: per-query scoring, macro-averaged aggregation, reports, exports
- sources.py: readers for queries, qrels, stopwords, documents and run files
- engines.py: BM25 retrieval engine with analyzer variants
- evaluation.py: RunEvaluator driving runs over a query list
- _commands/: CLI commands (evaluate, search)
"""

__version__ = '0.1.0'

from click import group

from ._commands._evaluate import evaluate
from ._commands._search import search


@group()
def main():
    pass


main.add_command(evaluate, "evaluate")
main.add_command(search, "search")
