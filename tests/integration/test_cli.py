"""End-to-end tests for the cercami command line."""

import os
from pathlib import Path
import subprocess
import sys

import orjson
import pytest

from cercami import cli


pytestmark = pytest.mark.integration


def test_prints_results_counters_and_timings(corpus_path, capsys):
    assert cli.main([str(corpus_path), "quick fox"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "[0]"
    assert "Number of results: 1" in out
    assert "Total number of indexed tokens: 6" in out
    assert "Number of indexed documents: 3" in out
    assert any(line.startswith("Indexing: ") and line.endswith("s") for line in out)
    assert any(line.startswith("Search: ") and line.endswith("μs") for line in out)


def test_no_match(corpus_path, capsys):
    assert cli.main([str(corpus_path), "elephant"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "[]"
    assert "Number of results: 0" in out


def test_show_documents(corpus_path, capsys):
    assert cli.main([str(corpus_path), "brown", "--show-documents"]) == 0
    out = capsys.readouterr().out
    assert "[0] Document 0" in out
    assert "https://example.com/doc/2" in out
    assert "brown fox jumps" in out


def test_json_report(corpus_path, capsys):
    assert cli.main([str(corpus_path), "Brown FOX", "--json", "--backend", "sorted-array"]) == 0
    payload = orjson.loads(capsys.readouterr().out)
    assert payload["doc_ids"] == [0, 2]
    assert payload["terms"] == ["brown", "fox"]
    assert payload["result_count"] == 2
    assert payload["stats"] == {"document_count": 3, "term_count": 6, "postings_backend": "sorted-array"}
    assert "documents" not in payload


def test_stemmer_flag(corpus_path, capsys):
    assert cli.main([str(corpus_path), "run", "--stemmer", "none"]) == 0
    assert capsys.readouterr().out.splitlines()[0] == "[]"


def test_metrics_flag(corpus_path, capsys):
    assert cli.main([str(corpus_path), "fox", "--metrics"]) == 0
    assert "cercami_searches_total" in capsys.readouterr().out


@pytest.mark.parametrize(("argv", "message"), [([], "Didn't get a corpus path"), (["corpus.xml"], "Didn't get a query")])
def test_missing_inputs_are_usage_errors(argv, message, capsys):
    assert cli.main(argv) == 1
    err = capsys.readouterr().err
    assert "usage: cercami" in err
    assert message in err


def test_unreadable_corpus(tmp_path, capsys):
    assert cli.main([str(tmp_path / "missing.xml"), "fox"]) == 1
    assert "Cannot open corpus" in capsys.readouterr().err


def test_malformed_corpus(write_corpus, capsys):
    path = write_corpus("<feed><doc><title>broken</doc></feed>")
    assert cli.main([str(path), "fox"]) == 1
    captured = capsys.readouterr()
    assert "not well-formed" in captured.err
    assert captured.out == ""


def test_invalid_environment_configuration(corpus_path, monkeypatch, capsys):
    monkeypatch.setenv("CERCAMI_POSTINGS_BACKEND", "roaring")
    assert cli.main([str(corpus_path), "fox"]) == 1
    assert "Invalid configuration" in capsys.readouterr().err


def test_trace_flag_writes_spans_to_stderr(corpus_path):
    src = Path(cli.__file__).resolve().parents[1]
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [str(src), os.environ.get("PYTHONPATH")]))}
    completed = subprocess.run(
        [sys.executable, "-m", "cercami.cli", str(corpus_path), "quick fox", "--trace"],
        capture_output=True,
        text=True,
        env=env,
        check=False,
    )
    assert completed.returncode == 0
    assert completed.stdout.splitlines()[0] == "[0]"
    assert '"name": "index.build"' in completed.stderr
    assert '"name": "index.search"' in completed.stderr
    assert '"search.results": 1' in completed.stderr


def test_spans_stay_off_stderr_without_trace_flag(corpus_path, monkeypatch, capsys):
    monkeypatch.setenv("CERCAMI_TRACING_EXPORTER", "console")
    monkeypatch.setenv("CERCAMI_TRACING_ENABLED", "false")
    assert cli.main([str(corpus_path), "fox"]) == 0
    assert "index.build" not in capsys.readouterr().err
