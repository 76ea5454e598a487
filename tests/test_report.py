"""Tests for report rendering and measure export."""

import json
from pathlib import Path

from retrieval_evaluate.metrics import (
    ALL_QUERY_ID,
    AggregateReport,
    aggregate,
    comparison_frame,
    format_report,
    per_query_frame,
    report_to_dict,
    score,
    write_measures,
)


def _report() -> AggregateReport:
    return AggregateReport(
        total_retrieved=30,
        total_relevant=12,
        total_retrieved_relevant=6,
        mean_precision=0.25,
        mean_recall=0.5,
        f_measure=1 / 3,
        mean_average_precision=0.125,
        mean_r_precision=0.375,
        mean_precision_at_recall=(1.0, 0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3, 0.2, 0.1, 0.0),
    )


def test_format_report_lists_every_field_in_order():
    lines = format_report(_report()).split("\n")
    assert lines[0] == "Number of retrieved documents: 30"
    assert lines[1] == "Number of relevant documents: 12"
    assert lines[2] == "Number of relevant documents retrieved: 6"
    assert lines[3] == "Average precision: 0.25"
    assert lines[4] == "Average recall: 0.5"
    assert lines[5].startswith("F-measure: 0.333")
    assert lines[6] == "MAP: 0.125"
    assert lines[7] == "Average R-Precision: 0.375"
    assert lines[8].startswith("Average precision at recall levels")
    assert lines[9] == "\t0: 1.0"
    assert lines[19] == "\t10: 0.0"
    assert len(lines) == 20


def test_format_report_shows_undefined_f_measure():
    report = aggregate([score([], {1})], 1)
    assert "F-measure: nan" in format_report(report)


def test_report_to_dict_curve_keys():
    row = report_to_dict(_report())
    assert row["map"] == 0.125
    assert row["iprec_at_recall_0.00"] == 1.0
    assert row["iprec_at_recall_1.00"] == 0.0


def test_per_query_frame_has_mean_row():
    df = per_query_frame([score([1], {1}, 1), score([2], {1}, 2)])
    assert list(df["Query"]) == [1, 2, "MEAN"]
    mean_row = df.iloc[-1]
    assert mean_row["AP"] == 0.5
    assert mean_row["Precision"] == 0.5
    assert mean_row["Retrieved"] == ""


def test_comparison_frame_one_row_per_run():
    df = comparison_frame({"a": _report(), "b": _report()})
    assert list(df["Run"]) == ["a", "b"]
    assert "map" in df.columns


def test_write_measures_trec_eval(tmp_path: Path):
    per_query = [score([5, 3, 9], {3, 9}, 1)]
    out = tmp_path / "out" / "run.txt"
    write_measures(out, "run", per_query, aggregate(per_query, 1), format="trec_eval")

    lines = out.read_text().strip().split("\n")
    assert "num_ret\t1\t3" in lines
    assert "Rprec\t1\t0.5" in lines
    assert any(line.startswith(f"map\t{ALL_QUERY_ID}\t") for line in lines)


def test_write_measures_ir_measures_and_jsonl(tmp_path: Path):
    per_query = [score([1], {1}, 7)]

    ir = tmp_path / "run.ir"
    write_measures(ir, "bm25", per_query, format="ir_measures")
    assert "bm25\t7\tmap\t1.0" in ir.read_text().split("\n")

    jl = tmp_path / "run.jsonl"
    write_measures(jl, "bm25", per_query, format="jsonl")
    first = json.loads(jl.read_text().split("\n")[0])
    assert first == {"run": "bm25", "query_id": "7", "measure": "num_ret", "value": 1}


def test_jsonl_writes_undefined_f_measure_as_null(tmp_path: Path):
    per_query = [score([], {1}, 1)]
    out = tmp_path / "run.jsonl"
    write_measures(out, "empty", per_query, aggregate(per_query, 1), format="jsonl")

    rows = [json.loads(line) for line in out.read_text().strip().split("\n")]
    f_row = next(r for r in rows if r["query_id"] == ALL_QUERY_ID and r["measure"] == "F")
    assert f_row["value"] is None
