import unittest
from click.testing import CliRunner
from pathlib import Path
from retrieval_evaluate import main
from retrieval_evaluate._commands._evaluate import run_names
from tempfile import TemporaryDirectory

QUERIES = "1\tpreliminary report\n2\tcompiler design\n3\tmatrix inversion\n"
QRELS = "1;1\n2;2,3\n"
RUN = (
    "1 Q0 1 1 2.0 test\n"
    "2 Q0 3 1 2.0 test\n"
    "2 Q0 4 2 1.0 test\n"
    "3 Q0 5 1 1.0 test\n"
)
DOCUMENTS = (
    "1\tPreliminary Report\tInternational Algebraic Language\n"
    "2\tCompiler design for ALGOL\n"
    "3\tA compiler generator\n"
    "4\tRandom number generation\n"
    "5\tSorting with tapes\n"
    "6\tEigenvalues of symmetric matrices\n"
)


def run_cmd_on_main(cmd):
    runner = CliRunner()
    ret = runner.invoke(main, cmd)
    return ret, ' '.join(ret.stdout.split())


class TestEvaluateInterface(unittest.TestCase):
    def setUp(self):
        self._tmp = TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.queries = self.dir / "query.txt"
        self.queries.write_text(QUERIES)
        self.qrels = self.dir / "qrels.txt"
        self.qrels.write_text(QRELS)
        self.run = self.dir / "test.run"
        self.run.write_text(RUN)

    def tearDown(self):
        self._tmp.cleanup()

    def evaluate(self, *extra):
        cmd = ["evaluate", "--queries", str(self.queries), "--qrels", str(self.qrels),
               "--run", str(self.run), *extra]
        return run_cmd_on_main(cmd)

    def test_report_for_run_file(self):
        result, stdout = self.evaluate()

        self.assertIsNone(result.exception)
        self.assertEqual(result.exit_code, 0)
        self.assertIn("=== test.run", stdout)
        self.assertIn("Number of retrieved documents: 4", stdout)
        self.assertIn("Number of relevant documents: 3", stdout)
        self.assertIn("Number of relevant documents retrieved: 2", stdout)
        self.assertIn("F-measure: 0.5", stdout)
        self.assertIn("MAP: 0.5", stdout)
        self.assertIn("Average R-Precision: 0.5", stdout)
        self.assertIn("10: 0.3333333333333333", stdout)

    def test_per_query_table(self):
        result, stdout = self.evaluate("--per-query")

        self.assertEqual(result.exit_code, 0)
        self.assertIn("Query Retrieved Relevant RelRet", stdout)
        self.assertIn("MEAN", stdout)

    def test_two_runs_print_summary(self):
        other = self.dir / "other.run"
        other.write_text("1 Q0 9 1 1.0 other\n")
        result, stdout = self.evaluate("--run", str(other))

        self.assertEqual(result.exit_code, 0)
        self.assertIn("=== other.run", stdout)
        self.assertIn("=== Summary", stdout)
        self.assertIn("F-measure: nan", stdout)

    def test_output_files(self):
        out = self.dir / "results"
        result, stdout = self.evaluate("--output", str(out), "--format", "ir_measures")

        self.assertEqual(result.exit_code, 0)
        self.assertTrue((out / "test.run.csv").is_file())
        measures = (out / "test.run.ir_measures.txt").read_text()
        self.assertIn("test.run\tall\tmap\t0.5", measures)
        self.assertIn("Query,Retrieved,Relevant,RelRet", (out / "test.run.csv").read_text())

    def test_runs_with_same_file_name_are_kept_apart(self):
        for sub in ("a", "b"):
            (self.dir / sub).mkdir()
        (self.dir / "a" / "bm25.run").write_text(RUN)
        (self.dir / "b" / "bm25.run").write_text("1 Q0 9 1 1.0 other\n")
        out = self.dir / "results"
        cmd = ["evaluate", "--queries", str(self.queries), "--qrels", str(self.qrels),
               "--run", str(self.dir / "a" / "bm25.run"), "--run", str(self.dir / "b" / "bm25.run"),
               "--output", str(out)]
        result, stdout = run_cmd_on_main(cmd)

        self.assertEqual(result.exit_code, 0)
        self.assertIn("=== a/bm25.run", stdout)
        self.assertIn("=== b/bm25.run", stdout)
        self.assertIn("=== Summary", stdout)
        self.assertTrue((out / "a_bm25.run.csv").is_file())
        self.assertTrue((out / "b_bm25.run.csv").is_file())
        self.assertIn("map\tall\t0.5", (out / "a_bm25.run.trec_eval.txt").read_text())
        self.assertIn("map\tall\t0.0", (out / "b_bm25.run.trec_eval.txt").read_text())

    def test_malformed_qrels_fail(self):
        self.qrels.write_text("1;abc\n")
        result, stdout = self.evaluate()

        self.assertIsNotNone(result.exception)
        self.assertEqual(result.exit_code, 1)

    def test_empty_query_file_fails(self):
        self.queries.write_text("\n")
        result, stdout = self.evaluate()

        self.assertEqual(result.exit_code, 1)


class TestSearchInterface(unittest.TestCase):
    def setUp(self):
        self._tmp = TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.queries = self.dir / "query.txt"
        self.queries.write_text(QUERIES)
        self.qrels = self.dir / "qrels.txt"
        self.qrels.write_text(QRELS)
        self.documents = self.dir / "cacm.txt"
        self.documents.write_text(DOCUMENTS)
        self.stopwords = self.dir / "common_words.txt"
        self.stopwords.write_text("a\nfor\nwith\nof\n")

    def tearDown(self):
        self._tmp.cleanup()

    def search(self, *extra):
        cmd = ["search", "--queries", str(self.queries), "--qrels", str(self.qrels),
               "--documents", str(self.documents), *extra]
        return run_cmd_on_main(cmd)

    def test_all_analyzers_with_stopwords(self):
        result, stdout = self.search("--stopwords", str(self.stopwords))

        self.assertIsNone(result.exception)
        self.assertEqual(result.exit_code, 0)
        for name in ["whitespace", "standard", "english", "english-custom-stopwords"]:
            self.assertIn(f"=== {name}", stdout)
        self.assertIn("=== Summary", stdout)

    def test_single_analyzer(self):
        result, stdout = self.search("--analyzer", "english")

        self.assertEqual(result.exit_code, 0)
        self.assertIn("=== english", stdout)
        self.assertNotIn("=== standard", stdout)
        self.assertNotIn("=== Summary", stdout)
        self.assertIn("Number of relevant documents: 3", stdout)

    def test_custom_stopwords_analyzer_requires_stopwords(self):
        result, stdout = self.search("--analyzer", "english-custom-stopwords")

        self.assertEqual(result.exit_code, 2)

    def test_default_analyzers_skip_custom_stopwords_without_list(self):
        result, stdout = self.search()

        self.assertEqual(result.exit_code, 0)
        self.assertIn("=== english", stdout)
        self.assertNotIn("=== english-custom-stopwords", stdout)


class TestRunNames(unittest.TestCase):
    def test_unique_names_stay_plain(self):
        self.assertEqual(run_names([Path("x/a.run"), Path("y/b.run")]), ["a.run", "b.run"])

    def test_colliding_parents_get_a_counter(self):
        paths = [Path("x/a/r.run"), Path("y/a/r.run"), Path("z/b/r.run")]
        self.assertEqual(run_names(paths), ["a/r.run", "a/r.run#2", "b/r.run"])
