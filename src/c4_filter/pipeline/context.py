"""Core pipeline data model.

Document is the caller-owned input; the pipeline only reads it.
PipelineResult is the per-document record that stages enrich as they run:
each stage adds its filter flag(s) and its metrics, and the first stage that
rejects stops the run. Batch-level types aggregate those records.

Every type serialises to plain dicts (`to_dict`) with float ratios and
int counts, ready for JSON / Parquet writers.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..fingerprints.ngrams import DedupResult
from ..lang.identify import LanguageResult
from ..quality.metrics import TextMetrics

# first non-empty wins; crawler output carries the boilerplate-free body in filtered_text
TEXT_FIELDS = ("filtered_text", "filteredText", "text")


@dataclass(frozen=True)
class Document:
    title: str = ""
    text: str = ""
    url: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)
    # set by from_mapping: the key `text` was read from, and the input's key order
    text_key: str = field(default="text", compare=False)
    keys: Optional[Tuple[str, ...]] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any], text_field: Optional[str] = None) -> "Document":
        candidates = (text_field,) if text_field else TEXT_FIELDS
        text, text_key = "", candidates[-1]
        for k in candidates:
            v = record.get(k)
            if isinstance(v, str) and v:
                text, text_key = v, k
                break
        title = record.get("title")
        url = record.get("url")
        # other text fields stay in extra so export returns them unchanged
        consumed = {"title", "url"} | ({text_key} if text else set())
        return cls(
            title=str(title) if title is not None else "",
            text=text,
            url=str(url) if url is not None else None,
            extra={k: v for k, v in record.items() if k not in consumed},
            text_key=text_key,
            keys=tuple(record),
        )

    def to_dict(self) -> Dict[str, Any]:
        """The document's fields. A mapping-built document gives back exactly its input keys
        (plus any `extra` added since), in input order."""
        if self.keys is None:
            out: Dict[str, Any] = dict(self.extra)
            out.update({"title": self.title, "url": self.url, "text": self.text})
            return out
        values: Dict[str, Any] = {"title": self.title, "url": self.url, self.text_key: self.text}
        values.update(self.extra)
        out = {k: values[k] for k in self.keys if k in values}
        for k, v in self.extra.items():
            out.setdefault(k, v)
        return out


@dataclass
class Decision:
    accepted: bool
    stage: str
    reason_code: str = ""
    reason_detail: str = ""


@dataclass
class PipelineResult:
    document: Document
    passed: bool = True
    rejected_at: Optional[str] = None
    reason_code: str = ""
    reason_detail: str = ""
    filters: Dict[str, bool] = field(default_factory=dict)
    language: Optional[LanguageResult] = None
    metrics: Optional[TextMetrics] = None
    dedup: Optional[DedupResult] = None

    def reject(self, decision: Decision) -> None:
        self.passed = False
        self.rejected_at = decision.stage
        self.reason_code = decision.reason_code
        self.reason_detail = decision.reason_detail

    def failed_filters(self) -> List[str]:
        return [name for name, failed in self.filters.items() if failed]

    def metrics_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.language is not None:
            out["language"] = self.language.to_dict()
        if self.metrics is not None:
            out["text"] = self.metrics.to_dict()
        if self.dedup is not None:
            out["ngram_duplication"] = self.dedup.to_dict()
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document": self.document.to_dict(),
            "pipeline": {
                "passed": self.passed,
                "rejected_at": self.rejected_at,
                "reason_code": self.reason_code,
                "reason_detail": self.reason_detail,
                "filters": dict(self.filters),
                "metrics": self.metrics_dict(),
            },
        }


@dataclass
class BatchStats:
    total: int = 0
    passed: int = 0
    failed: int = 0
    failure_reasons: Dict[str, int] = field(default_factory=dict)

    def record(self, result: PipelineResult) -> None:
        self.total += 1
        if result.passed:
            self.passed += 1
            return
        self.failed += 1
        for name in result.failed_filters():
            self.failure_reasons[name] = self.failure_reasons.get(name, 0) + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "failure_reasons": dict(self.failure_reasons),
        }


@dataclass
class BatchResult:
    results: List[PipelineResult] = field(default_factory=list)
    stats: BatchStats = field(default_factory=BatchStats)

    @property
    def pass_rate(self) -> float:
        return self.stats.passed / self.stats.total if self.stats.total else 0.0

    def to_dict(self, include_results: bool = True) -> Dict[str, Any]:
        out: Dict[str, Any] = {"stats": self.stats.to_dict(), "pass_rate": self.pass_rate}
        if include_results:
            out["results"] = [r.to_dict() for r in self.results]
        return out


@dataclass(frozen=True)
class PipelineStats:
    processed_documents: int
    unique_ngrams: int
    estimated_bytes: int

    @property
    def estimated_mb(self) -> float:
        return self.estimated_bytes / (1024 * 1024)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processed_documents": self.processed_documents,
            "unique_ngrams": self.unique_ngrams,
            "memory_usage": {
                "ngram_set_size": self.unique_ngrams,
                "estimated_mb": self.estimated_mb,
            },
        }
