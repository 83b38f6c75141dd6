"""Built-in stages, in pipeline order.

These implement:
- empty-text gate
- language gate (target languages + min confidence)
- quality gate (all C4-style heuristics, evaluated together)
- n-gram dedup gate (overlap against previously accepted documents)
"""

from __future__ import annotations
import logging

from ..config import PipelineConfig
from ..fingerprints.ngram_store import NGramStore
from ..fingerprints.ngrams import check_and_maybe_commit
from ..lang.identify import LanguageClassifier, LanguageStatus, identify_language
from ..pipeline.context import Decision, PipelineResult
from ..quality.filters import apply_quality_filters, failed_filters
from ..quality.metrics import compute_metrics
from .base import Stage

log = logging.getLogger("c4_filter.stages")

_LANG_REASON = {
    LanguageStatus.REJECTED: "LANG_MISMATCH",
    LanguageStatus.UNDETERMINED: "LANG_UNDETERMINED",
    LanguageStatus.CLASSIFIER_ERROR: "LANG_CLASSIFIER_ERROR",
}

class EmptyTextGate(Stage):
    name = "empty_text"
    layer = "input"

    def apply(self, item: PipelineResult) -> Decision:
        if not item.document.text.strip():
            item.filters["empty_text"] = True
            return Decision(False, self.name, "EMPTY_TEXT", "no text to evaluate")
        return Decision(True, self.name)

class LanguageGate(Stage):
    name = "language"
    layer = "language"

    def __init__(self, config: PipelineConfig, classifier: LanguageClassifier):
        self.config = config
        self.classifier = classifier

    def apply(self, item: PipelineResult) -> Decision:
        res = identify_language(item.document.text, self.config, self.classifier)
        item.language = res
        item.filters["language"] = not res.passed
        if not res.passed:
            return Decision(False, self.name, _LANG_REASON[res.status], res.reason or "")
        return Decision(True, self.name)

class QualityGate(Stage):
    name = "quality"
    layer = "quality"

    def __init__(self, config: PipelineConfig):
        self.config = config

    def apply(self, item: PipelineResult) -> Decision:
        metrics = compute_metrics(item.document.text)
        outcome = apply_quality_filters(metrics, self.config)
        item.metrics = metrics
        item.filters.update(outcome)
        failed = failed_filters(outcome)
        if failed:
            return Decision(False, self.name, "LOW_QUALITY", ",".join(failed))
        return Decision(True, self.name)

class NGramDedup(Stage):
    name = "dedup"
    layer = "dedup"

    def __init__(self, config: PipelineConfig, store: NGramStore):
        self.config = config
        self.store = store

    def apply(self, item: PipelineResult) -> Decision:
        # committed later, once every stage has accepted
        res = check_and_maybe_commit(item.document.text, self.config, self.store, commit=False)
        item.dedup = res
        item.filters["duplicate"] = not res.passed
        if not res.passed:
            return Decision(False, self.name, "DUP_NGRAM", res.reason or "")
        return Decision(True, self.name)

    def commit(self, item: PipelineResult) -> None:
        if item.dedup is None:
            return
        self.store.add(item.dedup.ngrams)
