"""Integration tests for the local build runner, JSONL source and CLI."""

from __future__ import annotations

import json
import logging

import pyarrow.parquet as pq
import pytest

from c4_filter import cli
from c4_filter.pipeline.build import build_local
from c4_filter.sources.base import SourceSpec
from c4_filter.sources.local_jsonl import LocalJSONLSource

from conftest import FRENCH_TEXT, GOOD_TEXT, OTHER_GOOD_TEXT, ScriptedClassifier

PIPELINE_OPTS = {
    "targetLanguages": ["eng"],
    "minTextLength": 50,
    "minWordCount": 10,
    "ngramSize": 5,
    "maxSymbolToWordRatio": 1.0,
    "minLinesEndingWithPunctuation": 0.3,
}


def _write_jsonl(path, rows):
    with open(path, "w", encoding="utf-8") as f:
        for r in rows:
            f.write((r if isinstance(r, str) else json.dumps(r)) + "\n")


@pytest.fixture
def crawl_dir(tmp_path):
    d = tmp_path / "crawl"
    d.mkdir()
    _write_jsonl(d / "a.jsonl", [
        {"title": "River", "url": "http://w/river", "filteredText": GOOD_TEXT, "rawTextLength": 900},
        "{not json",
        {"title": "French", "url": "http://w/fr", "filteredText": FRENCH_TEXT},
        "",
    ])
    _write_jsonl(d / "b.jsonl", [
        {"title": "River copy", "url": "http://m/river", "text": GOOD_TEXT},
        {"title": "Trails", "url": "http://m/trails", "text": OTHER_GOOD_TEXT},
        {"title": "Blank", "text": "   "},
    ])
    return d


def _classifier():
    return ScriptedClassifier(rules={"village": [("fra", 0.95)]})


class TestLocalJSONLSource:
    def test_streams_directory_in_order_and_skips_bad_lines(self, crawl_dir):
        src = LocalJSONLSource(SourceSpec(name="crawl", dataset=str(crawl_dir)))
        docs = list(src.stream())
        assert [d.title for d in docs] == ["River", "French", "River copy", "Trails", "Blank"]
        assert docs[0].text == GOOD_TEXT
        assert docs[0].extra["rawTextLength"] == 900
        assert docs[0].extra["source"] == "crawl"
        assert src.metadata()["file_count"] == 2

    def test_glob_and_missing_file(self, crawl_dir):
        src = LocalJSONLSource(SourceSpec(name="g", dataset=[str(crawl_dir / "b*.jsonl"), str(crawl_dir / "nope.jsonl")]))
        assert len(list(src.stream())) == 3

    def test_explicit_text_field(self, tmp_path):
        p = tmp_path / "c.jsonl"
        _write_jsonl(p, [{"title": "x", "body": "hello", "text": "ignored"}])
        (d,) = LocalJSONLSource(SourceSpec(name="c", dataset=str(p), text_field="body")).stream()
        assert d.text == "hello"
        assert d.extra["text"] == "ignored"


class TestBuildLocal:
    def _cfg(self, crawl_dir, out_dir, fmt="jsonl"):
        return {
            "run": {"run_id": "t1", "out_dir": str(out_dir), "output_format": fmt, "progress": False},
            "pipeline": PIPELINE_OPTS,
            "sources": [
                {"name": "wiki", "dataset": str(crawl_dir / "a.jsonl")},
                {"name": "mirror", "dataset": str(crawl_dir / "b.jsonl")},
            ],
        }

    def test_dedup_across_sources(self, crawl_dir, tmp_path):
        out = tmp_path / "out"
        manifest = build_local(self._cfg(crawl_dir, out), classifier=_classifier())

        assert manifest["stats"]["total"] == 5
        assert manifest["stats"]["passed"] == 2
        assert manifest["stats"]["failure_reasons"] == {"language": 1, "duplicate": 1, "empty_text": 1}
        assert manifest["sources"]["wiki"]["stats"]["passed"] == 1
        assert manifest["sources"]["mirror"]["stats"]["failure_reasons"]["duplicate"] == 1
        assert manifest["pipeline"]["processed_documents"] == 2
        assert manifest["stages"] == ["empty_text", "language", "quality", "dedup"]

        mirror_docs = (out / "docs" / "source=mirror" / "docs.jsonl").read_text(encoding="utf-8").splitlines()
        assert [json.loads(l)["title"] for l in mirror_docs] == ["Trails"]

        rejections = [json.loads(l) for l in (out / "rejections" / "rejections.jsonl").read_text(encoding="utf-8").splitlines()]
        assert [(r["source"], r["stage"]) for r in rejections] == [
            ("wiki", "language"),
            ("mirror", "dedup"),
            ("mirror", "empty_text"),
        ]
        assert rejections[1]["failed_filters"] == ["duplicate"]

        saved = json.loads((out / "manifests" / "t1.json").read_text(encoding="utf-8"))
        assert saved["stats"] == manifest["stats"]

    def test_parquet_output(self, crawl_dir, tmp_path):
        out = tmp_path / "out"
        build_local(self._cfg(crawl_dir, out, fmt="parquet"), classifier=_classifier())
        table = pq.read_table(str(out / "docs" / "source=wiki" / "docs.parquet"))
        rows = table.to_pylist()
        assert [r["title"] for r in rows] == ["River"]
        assert json.loads(rows[0]["extra_json"])["rawTextLength"] == 900
        assert rows[0]["text"] == GOOD_TEXT
        assert "filteredText" not in json.loads(rows[0]["extra_json"])

    def test_rerun_starts_fresh_rejection_log(self, crawl_dir, tmp_path):
        out = tmp_path / "out"
        cfg = self._cfg(crawl_dir, out)
        cfg["run"]["log_every_docs"] = 0
        build_local(cfg, classifier=_classifier())
        build_local(cfg, classifier=_classifier())
        lines = (out / "rejections" / "rejections.jsonl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 3

    def test_registered_in_memory_source(self, tmp_path):
        from c4_filter.pipeline.context import Document
        from c4_filter.sources.base import DataSource
        from c4_filter.sources.registry import list_sources, register_source

        class ListSource(DataSource):
            def __init__(self, spec):
                self.name = spec.name
                self.texts = spec.dataset

            def stream(self):
                for i, t in enumerate(self.texts):
                    yield Document(title=f"m{i}", text=t)

        if "memory_test" not in list_sources():
            register_source("memory_test", ListSource)
        with pytest.raises(ValueError):
            register_source("memory_test", ListSource)

        cfg = {
            "run": {"run_id": "mem", "out_dir": str(tmp_path), "progress": False},
            "pipeline": PIPELINE_OPTS,
            "sources": [{"name": "mem", "kind": "memory_test", "dataset": [GOOD_TEXT, GOOD_TEXT, OTHER_GOOD_TEXT]}],
        }
        manifest = build_local(cfg, classifier=_classifier())
        assert manifest["stats"]["passed"] == 2
        assert manifest["stats"]["failure_reasons"] == {"duplicate": 1}

    def test_stage_subset(self, crawl_dir, tmp_path):
        cfg = self._cfg(crawl_dir, tmp_path / "out")
        cfg["stages"] = ["dedup", "empty_text", "quality"]
        manifest = build_local(cfg, classifier=_classifier())
        assert manifest["stages"] == ["empty_text", "quality", "dedup"]
        # french text is no longer rejected by language
        assert "language" not in manifest["stats"]["failure_reasons"]


class TestCli:
    @pytest.fixture(autouse=True)
    def _restore_root_logging(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_check_prints_batch_stats(self, crawl_dir, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("c4_filter.pipeline.orchestrator.LangdetectClassifier", _classifier)
        conf = tmp_path / "pipeline.yaml"
        conf.write_text("pipeline:\n" + "".join(f"  {k}: {json.dumps(v)}\n" for k, v in PIPELINE_OPTS.items()), encoding="utf-8")

        rc = cli.main(["check", "--config", str(conf), str(crawl_dir / "a.jsonl"), str(crawl_dir / "b.jsonl")])
        assert rc == 0
        out = json.loads(capsys.readouterr().out)
        assert out["stats"]["total"] == 5
        assert out["stats"]["passed"] == 2
        assert "results" not in out
        assert out["pipeline"]["processed_documents"] == 2

    def test_invalid_config_exit_code(self, crawl_dir, tmp_path):
        conf = tmp_path / "bad.yaml"
        conf.write_text("ngram_size: 0\n", encoding="utf-8")
        assert cli.main(["check", "--config", str(conf), str(crawl_dir / "a.jsonl")]) == 2


class TestReport:
    def test_renders_latest_manifest(self, crawl_dir, tmp_path):
        from rich.console import Console

        from c4_filter.monitor.report import load_manifest, render_report

        out = tmp_path / "out"
        build_local(TestBuildLocal()._cfg(crawl_dir, out), classifier=_classifier())
        manifest = load_manifest(str(out))
        assert manifest["run_id"] == "t1"

        console = Console(record=True, width=160)
        render_report(manifest, console=console)
        text = console.export_text()
        assert "wiki" in text and "mirror" in text
        assert "duplicate" in text
        assert "40.0%" in text

    def test_missing_manifest(self, tmp_path):
        from c4_filter.monitor.report import load_manifest

        assert load_manifest(str(tmp_path)) is None
        assert load_manifest(str(tmp_path), run_id="nope") is None
