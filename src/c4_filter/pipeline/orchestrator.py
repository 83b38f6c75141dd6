"""CorpusPipeline: C4-style filtering with cross-document n-gram dedup.

Per document the stages run strictly in order and stop at the first
rejection:

    empty_text -> language -> quality -> dedup -> commit

Only a document accepted by every stage is committed: its n-grams go into
the pipeline's NGramStore and the processed-document counter increments.
Rejected documents leave the store untouched.

Processing is sequential. Document i's commit is visible to document i+1,
across batches too, until `reset()`.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union
import logging

from ..config import PipelineConfig
from ..errors import BatchAbortedError
from ..fingerprints.ngram_store import NGramStore
from ..lang.identify import LangdetectClassifier, LanguageClassifier
from ..stages.registry import make_stages
from .context import BatchResult, Document, PipelineResult, PipelineStats

log = logging.getLogger("c4_filter.pipeline")

DocumentLike = Union[Document, Mapping[str, Any]]


class CorpusPipeline:
    def __init__(
        self,
        config: Union[PipelineConfig, Mapping[str, Any], None] = None,
        *,
        classifier: Optional[LanguageClassifier] = None,
        store: Optional[NGramStore] = None,
        stage_names: Optional[Sequence[str]] = None,
    ):
        """
        Args:
            config: PipelineConfig, or a flat option mapping (see PipelineConfig.from_dict)
            classifier: language classifier; defaults to LangdetectClassifier
            store: n-gram store to own; must not be owned by another pipeline
            stage_names: subset of stages to run (always in canonical order)
        """
        if config is None:
            config = PipelineConfig()
        elif not isinstance(config, PipelineConfig):
            config = PipelineConfig.from_dict(config)
        self.config = config
        self.classifier = classifier if classifier is not None else LangdetectClassifier()
        self.store = store if store is not None else NGramStore()
        self.store.acquire(self)
        self.stages = make_stages(self.config, self.classifier, self.store, stage_names)

    @property
    def processed_documents(self) -> int:
        return self.store.processed_documents

    def process_document(self, document: DocumentLike) -> PipelineResult:
        item = PipelineResult(document=_as_document(document))
        for st in self.stages:
            d = st.apply(item)
            if not d.accepted:
                item.reject(d)
                log.debug(f"Rejected doc title={item.document.title!r} stage={d.stage} reason={d.reason_code} detail={d.reason_detail}")
                return item
        for st in self.stages:
            st.commit(item)
        self.store.count_document()
        return item

    def process_batch(self, documents: Iterable[DocumentLike]) -> BatchResult:
        batch = BatchResult()
        try:
            for doc in documents:
                res = self.process_document(doc)
                batch.results.append(res)
                batch.stats.record(res)
        except MemoryError as e:
            log.error(f"Batch aborted after {batch.stats.total} docs: out of memory (unique_ngrams={self.store.size})")
            raise BatchAbortedError(
                f"batch aborted after {batch.stats.total} documents: out of memory",
                partial=batch,
                cause=e,
            ) from e
        s = batch.stats
        log.info(f"Batch done total={s.total} passed={s.passed} failed={s.failed} pass_rate={batch.pass_rate:.3f} unique_ngrams={self.store.size}")
        return batch

    def reset(self) -> None:
        """Forget every committed n-gram and zero the document counter. Config is kept."""
        log.info(f"Resetting dedup state (processed={self.store.processed_documents} unique_ngrams={self.store.size})")
        self.store.clear()

    def get_stats(self) -> PipelineStats:
        return PipelineStats(
            processed_documents=self.store.processed_documents,
            unique_ngrams=self.store.size,
            estimated_bytes=self.store.estimated_bytes(),
        )

    def export_filtered(self, results: Union[BatchResult, Iterable[PipelineResult]]) -> List[dict]:
        """Original document fields of accepted results, in order, without pipeline data."""
        if isinstance(results, BatchResult):
            results = results.results
        return [r.document.to_dict() for r in results if r.passed]

    def close(self) -> None:
        """Give up ownership of the store so another pipeline may adopt it."""
        self.store.release()


def _as_document(document: DocumentLike) -> Document:
    if isinstance(document, Document):
        if not isinstance(document.text, str):
            return replace(document, text="")
        return document
    if isinstance(document, Mapping):
        return Document.from_mapping(document)
    return Document()
