"""CLI command for building BM25 engines per analyzer and scoring them."""

from pathlib import Path
from typing import Dict, Optional

import click

from retrieval_evaluate.engines import ANALYZERS, DEFAULT_MAX_RESULTS, Bm25Engine, make_analyzer
from retrieval_evaluate.metrics import AggregateReport, comparison_frame
from retrieval_evaluate.sources import ParseError, read_documents, read_stopwords

from ._common import emit_run, input_options, make_evaluator, output_options


@click.command()
@input_options
@click.option(
    "--documents",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Collection: '<doc_id>\\t<field>\\t<field>...' per line.",
)
@click.option(
    "--analyzer", "analyzers",
    type=click.Choice(ANALYZERS),
    multiple=True,
    help="Analyzer variant(s) to evaluate. Repeatable. Defaults to all.",
)
@click.option(
    "--stopwords",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Stop word list, one per line. Required for english-custom-stopwords.",
)
@click.option("--max-results", type=click.IntRange(min=1), default=DEFAULT_MAX_RESULTS,
              help="Maximum number of documents retrieved per query.")
@output_options
def search(
    queries: Path,
    qrels: Path,
    documents: Path,
    analyzers: tuple,
    stopwords: Optional[Path],
    max_results: int,
    per_query: bool,
    output: Optional[Path],
    measure_format: str,
):
    """Index the collection once per analyzer and score each BM25 run.

    \b
    Analyzers:
      whitespace                exact whitespace tokens
      standard                  lowercased word tokens
      english                   standard + English stop words + Porter stemming
      english-custom-stopwords  english with the --stopwords list
    """
    selected = list(analyzers) if analyzers else list(ANALYZERS)

    if "english-custom-stopwords" in selected and stopwords is None:
        if analyzers:
            raise click.UsageError("--analyzer english-custom-stopwords requires --stopwords.")
        click.echo("Warning: no --stopwords given, skipping english-custom-stopwords", err=True)
        selected.remove("english-custom-stopwords")

    evaluator = make_evaluator(queries, qrels)
    try:
        collection = read_documents(documents)
        words = read_stopwords(stopwords) if stopwords else None
    except ParseError as e:
        raise click.ClickException(str(e))

    reports: Dict[str, AggregateReport] = {}
    for name in selected:
        engine = Bm25Engine(collection, make_analyzer(name, words), max_results=max_results)
        evaluation = evaluator.evaluate(engine, name=name)
        emit_run(evaluation, per_query, output, measure_format)
        reports[name] = evaluation.report

    if len(reports) > 1:
        click.echo("\n=== Summary")
        click.echo(comparison_frame(reports).to_string(index=False))
