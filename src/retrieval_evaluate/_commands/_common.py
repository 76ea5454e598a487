"""Helpers shared by the evaluation commands."""

from pathlib import Path
from typing import List, Optional, Tuple

import click

from retrieval_evaluate.evaluation import RunEvaluation, RunEvaluator
from retrieval_evaluate.judgments import RelevanceJudgments
from retrieval_evaluate.metrics import format_report, per_query_frame, write_measures
from retrieval_evaluate.metrics.export import FORMATS
from retrieval_evaluate.sources import ParseError, collection_stats, read_qrels, read_queries


def input_options(func):
    """--queries and --qrels, required by every evaluation command."""
    func = click.option("--qrels", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True,
                        help="Relevance judgments: '<query_id>;<doc_id>,<doc_id>,...' per line.")(func)
    func = click.option("--queries", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=True,
                        help="Queries: '<id>\\t<query text>' per line. Query ids are line positions.")(func)
    return func


def output_options(func):
    func = click.option("--format", "measure_format", type=click.Choice(FORMATS), default="trec_eval",
                        help="Format of the measures file written to --output.")(func)
    func = click.option("--output", type=click.Path(file_okay=False, path_type=Path), default=None,
                        help="Directory for per-run outputs: <run>.csv per-query table and <run>.<format> measures.")(func)
    func = click.option("--per-query/--no-per-query", default=False,
                        help="Print the per-query table for every run.")(func)
    return func


def load_inputs(queries_path: Path, qrels_path: Path) -> Tuple[List[str], RelevanceJudgments]:
    """Read queries and qrels, print collection statistics to stderr."""
    try:
        queries = read_queries(queries_path)
        judgments = read_qrels(qrels_path)
    except ParseError as e:
        raise click.ClickException(str(e))

    if not queries:
        raise click.ClickException(f"No queries found in {queries_path}")

    stats = collection_stats(queries, judgments)
    click.echo(f"Number of queries: {stats.num_queries}", err=True)
    click.echo(f"Number of qrels: {stats.num_qrels}", err=True)
    click.echo(f"Average number of relevant docs per query: {stats.avg_relevant_per_query}", err=True)
    return queries, judgments


def make_evaluator(queries_path: Path, qrels_path: Path) -> RunEvaluator:
    queries, judgments = load_inputs(queries_path, qrels_path)
    return RunEvaluator(queries, judgments)


def emit_run(
    evaluation: RunEvaluation,
    per_query: bool,
    output: Optional[Path],
    measure_format: str,
) -> None:
    """Print the report of one run and write its output files."""
    click.echo(f"\n=== {evaluation.name}")
    click.echo(format_report(evaluation.report))

    if per_query:
        df = per_query_frame(evaluation.per_query)
        click.echo(df.to_string(index=False))

    if output:
        output.mkdir(parents=True, exist_ok=True)
        safe_name = _file_name(evaluation.name)
        per_query_frame(evaluation.per_query).to_csv(output / f"{safe_name}.csv", index=False)
        suffix = "jsonl" if measure_format == "jsonl" else "txt"
        write_measures(
            output / f"{safe_name}.{measure_format}.{suffix}",
            evaluation.name,
            evaluation.per_query,
            evaluation.report,
            format=measure_format,
        )


def _file_name(name: str) -> str:
    return "".join(c if c.isalnum() or c in "-_." else "_" for c in name)
