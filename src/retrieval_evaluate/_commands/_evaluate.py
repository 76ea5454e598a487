"""CLI command for scoring precomputed TREC run files."""

from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

import click

from retrieval_evaluate.metrics import AggregateReport, comparison_frame
from retrieval_evaluate.sources import ParseError, read_run

from ._common import emit_run, input_options, make_evaluator, output_options


@click.command()
@input_options
@click.option(
    "--run", "runs",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    multiple=True,
    required=True,
    help="TREC run file '<qid> Q0 <docid> <rank> <score> <tag>'. Repeatable.",
)
@output_options
def evaluate(
    queries: Path,
    qrels: Path,
    runs: tuple,
    per_query: bool,
    output: Optional[Path],
    measure_format: str,
):
    """Score one or more run files against the qrels.

    Every run is scored over the full query list; queries missing from a
    run count as empty results.
    """
    evaluator = make_evaluator(queries, qrels)

    reports: Dict[str, AggregateReport] = {}
    for run_path, name in zip(runs, run_names(runs)):
        try:
            rankings = read_run(run_path)
        except ParseError as e:
            raise click.ClickException(str(e))

        evaluation = evaluator.evaluate_rankings(rankings, name=name)
        emit_run(evaluation, per_query, output, measure_format)
        reports[evaluation.name] = evaluation.report

    if len(reports) > 1:
        click.echo("\n=== Summary")
        click.echo(comparison_frame(reports).to_string(index=False))


def run_names(paths: Sequence[Path]) -> List[str]:
    """Display names for run files, unique across the given paths.

    The file name is used when it is unique, otherwise the parent directory
    is prefixed; a counter is appended if that still collides.
    """
    name_counts = Counter(p.name for p in paths)
    names: List[str] = []
    seen: Set[str] = set()
    for p in paths:
        name = p.name if name_counts[p.name] == 1 else f"{p.parent.name}/{p.name}"
        candidate, i = name, 2
        while candidate in seen:
            candidate = f"{name}#{i}"
            i += 1
        seen.add(candidate)
        names.append(candidate)
    return names
