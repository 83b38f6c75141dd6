"""Local build runner.

Reads every configured source in order through ONE CorpusPipeline, so a
document from the second source is deduplicated against everything accepted
from the first. Per source it writes:

- `docs/source=<name>/docs.<jsonl|parquet>`: accepted documents
- `rejections/rejections.jsonl`: stage, reason code and failed filters per rejected doc
- `manifests/<run_id>.json`: config, per-source and overall stats, dedup state size

This module is the entrypoint the CLI calls; the pipeline itself does no I/O.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging
import os
import time
from tqdm import tqdm

from ..config import PipelineConfig
from ..lang.identify import LanguageClassifier
from ..sources.base import SourceSpec
from ..sources.registry import make_source
from ..storage.writer import append_jsonl, get_docs_writer, write_manifest
from .context import BatchStats, PipelineResult
from .orchestrator import CorpusPipeline

log = logging.getLogger("c4_filter.build")

def _rejection_row(source: str, idx: int, res: PipelineResult) -> Dict[str, Any]:
    return {
        "source": source,
        "index": idx,
        "title": res.document.title,
        "url": res.document.url,
        "stage": res.rejected_at,
        "reason_code": res.reason_code,
        "reason_detail": res.reason_detail,
        "failed_filters": res.failed_filters(),
        "ts_ms": int(time.time() * 1000),
    }

def build_local(cfg: Dict[str, Any], *, classifier: Optional[LanguageClassifier] = None) -> Dict[str, Any]:
    run = cfg.get("run") or {}
    run_id = str(run.get("run_id") or "run")
    out_dir = run.get("out_dir") or "storage"
    fmt = run.get("output_format", "jsonl")
    log_every = max(1, int(run.get("log_every_docs", 1000)))
    progress = bool(run.get("progress", True))
    write_docs = get_docs_writer(fmt)

    config = PipelineConfig.from_dict(cfg.get("pipeline") or {})
    pipeline = CorpusPipeline(config, classifier=classifier, stage_names=cfg.get("stages"))
    rej_path = os.path.join(out_dir, "rejections", "rejections.jsonl")
    # no resume: a rerun into the same out_dir starts a fresh rejection log
    if os.path.exists(rej_path):
        log.info(f"Truncating previous rejections at {rej_path}")
        os.remove(rej_path)
    start_ms = int(time.time() * 1000)

    overall = BatchStats()
    per_source: Dict[str, Dict[str, Any]] = {}

    try:
        for s_cfg in cfg.get("sources") or []:
            spec = SourceSpec(**s_cfg)
            src = make_source(spec)
            log.info(f"Starting source={spec.name} kind={spec.kind} meta={src.metadata()}")

            stats = BatchStats()
            accepted: List[Dict[str, Any]] = []
            rejs: List[Dict[str, Any]] = []
            for i, doc in enumerate(tqdm(src.stream(), desc=spec.name, unit="doc", disable=not progress)):
                res = pipeline.process_document(doc)
                stats.record(res)
                overall.record(res)
                if res.passed:
                    accepted.extend(pipeline.export_filtered([res]))
                else:
                    rejs.append(_rejection_row(spec.name, i, res))

                if (i + 1) % log_every == 0:
                    log.info(f"source={spec.name} processed={i+1} passed={stats.passed} rejected={stats.failed}")
                    if rejs:
                        append_jsonl(rej_path, rejs)
                        rejs.clear()

            if rejs:
                append_jsonl(rej_path, rejs)
            ext = "parquet" if fmt == "parquet" else "jsonl"
            docs_path = os.path.join(out_dir, "docs", f"source={spec.name}", f"docs.{ext}")
            write_docs(docs_path, accepted, text_field=spec.text_field)
            per_source[spec.name] = {"stats": stats.to_dict(), "docs_path": docs_path}
            log.info(f"Finished source={spec.name} total={stats.total} passed={stats.passed} failed={stats.failed} -> {docs_path}")

        manifest = {
            "run_id": run_id,
            "start_time_ms": start_ms,
            "end_time_ms": int(time.time() * 1000),
            "config": config.to_dict(),
            "stages": [st.name for st in pipeline.stages],
            "sources": per_source,
            "stats": overall.to_dict(),
            "pass_rate": overall.passed / overall.total if overall.total else 0.0,
            "pipeline": pipeline.get_stats().to_dict(),
        }
        write_manifest(os.path.join(out_dir, "manifests", f"{run_id}.json"), manifest)
    finally:
        pipeline.close()
    return manifest
