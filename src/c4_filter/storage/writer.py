"""Output writers.

We keep writers simple and robust:
- accepted documents as `docs.jsonl` or `docs.parquet` (zstd) for training consumption
- `rejections.jsonl` for auditability (append-only)
- a run manifest (config, batch stats, dedup state size) at the end

Writers take plain dicts (`CorpusPipeline.export_filtered` output), so they
never see pipeline verdicts.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional
import json
import os
import pyarrow as pa
import pyarrow.parquet as pq

from ..pipeline.context import TEXT_FIELDS

def docs_schema() -> pa.Schema:
    return pa.schema([
        ("title", pa.string()),
        ("url", pa.string()),
        ("text", pa.string()),
        ("source", pa.string()),
        ("extra_json", pa.string()),  # remaining input fields, JSON-encoded
    ], metadata={"schema_version": "v1"})

_SCHEMA_COLUMNS = ("title", "url", "source")

def _text_key(d: Dict[str, Any], text_field: Optional[str]) -> Optional[str]:
    keys = (text_field,) if text_field else TEXT_FIELDS
    return next((k for k in keys if isinstance(d.get(k), str) and d[k]), None)

def write_docs_parquet(path: str, docs: List[Dict[str, Any]], text_field: Optional[str] = None) -> str:
    """`text` is read the way sources resolve it (`text_field`, else the first non-empty
    of TEXT_FIELDS); every other text field lands in `extra_json`."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    rows = []
    for d in docs:
        tk = _text_key(d, text_field)
        extra = {k: v for k, v in d.items() if k not in _SCHEMA_COLUMNS and k != tk}
        rows.append({
            "title": str(d.get("title") or ""),
            "url": str(d["url"]) if d.get("url") is not None else None,
            "text": d[tk] if tk else "",
            "source": str(d["source"]) if d.get("source") is not None else None,
            "extra_json": json.dumps(extra, ensure_ascii=False, default=str) if extra else None,
        })
    table = pa.Table.from_pylist(rows, schema=docs_schema())
    pq.write_table(table, path, compression="zstd")
    return path

def write_docs_jsonl(path: str, docs: List[Dict[str, Any]], text_field: Optional[str] = None) -> str:
    """Writes each exported document as is; `text_field` only matters for Parquet."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for d in docs:
            f.write(json.dumps(d, ensure_ascii=False, default=str) + "\n")
    return path

_DOC_WRITERS: Dict[str, Callable[..., str]] = {
    "jsonl": write_docs_jsonl,
    "parquet": write_docs_parquet,
}

def get_docs_writer(fmt: str) -> Callable[..., str]:
    if fmt not in _DOC_WRITERS:
        raise KeyError(f"Unknown output format: {fmt}. Available: {sorted(_DOC_WRITERS)}")
    return _DOC_WRITERS[fmt]

def append_jsonl(path: str, rows: List[Dict[str, Any]]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        for r in rows:
            f.write(json.dumps(r, ensure_ascii=False, default=str) + "\n")

def write_manifest(path: str, manifest: Dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False, default=str)
