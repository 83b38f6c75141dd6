"""Local JSONL source.

Each line is a JSON object, e.g. one crawled page:
- title, url (optional)
- filtered_text / filteredText / text: extracted body (first non-empty wins),
  or the field named by `SourceSpec.text_field`
Every other key is kept on `Document.extra` and survives export.

Supports multiple input formats:
- Single file: "path/to/file.jsonl"
- Multiple files: ["path/to/file1.jsonl", "path/to/file2.jsonl"]
- Directory: "path/to/directory/" (all .jsonl files, recursive)
- Glob pattern: "path/to/*.jsonl" or "path/to/**/*.jsonl"
"""

from __future__ import annotations
import glob
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from ..pipeline.context import Document
from .base import DataSource, SourceSpec

log = logging.getLogger("c4_filter.sources.local_jsonl")

class LocalJSONLSource(DataSource):
    def __init__(self, spec: SourceSpec):
        self.spec = spec
        self.name = spec.name
        self.files = self._resolve_files(spec.dataset)

    def _resolve_files(self, dataset: Union[str, List[str]]) -> List[str]:
        if isinstance(dataset, list):
            files: List[str] = []
            for item in dataset:
                files.extend(self._resolve_files(item))
            return files

        dataset = str(dataset)
        if any(c in dataset for c in "*?["):
            matched = glob.glob(dataset, recursive=True)
            return sorted(f for f in matched if os.path.isfile(f) and f.endswith(".jsonl"))

        path = Path(dataset)
        if path.is_dir():
            return sorted(str(f) for f in path.rglob("*.jsonl") if f.is_file())
        # single file; a missing one is reported when streaming
        return [dataset]

    def metadata(self) -> Dict[str, Any]:
        return {
            "kind": "local_jsonl",
            "files": self.files,
            "file_count": len(self.files),
            "total_size_bytes": sum(os.path.getsize(f) for f in self.files if os.path.exists(f)),
        }

    def stream(self) -> Iterable[Document]:
        """Stream documents from all configured JSONL files, in file then line order."""
        for file_path in self.files:
            if not os.path.exists(file_path):
                log.warning(f"File not found: {file_path}, skipping")
                continue
            with open(file_path, "r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        ex = json.loads(line)
                    except json.JSONDecodeError as e:
                        log.warning(f"Invalid JSON in {file_path}:{line_num}: {e}")
                        continue
                    if not isinstance(ex, dict):
                        log.warning(f"Skipping non-object record in {file_path}:{line_num}")
                        continue
                    doc = Document.from_mapping(ex, text_field=self.spec.text_field)
                    doc.extra.setdefault("source", self.name)
                    doc.extra.setdefault("source_file", file_path)
                    doc.extra.setdefault("source_line", line_num)
                    yield doc
