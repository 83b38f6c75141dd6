"""Word n-gram overlap deduplication (exact, lexical).

A document's n-grams are all contiguous windows of `n` lowercased
whitespace tokens, each joined by a single space. Its overlap ratio is the
fraction of those windows (counted with multiplicity) already present in the
store. Documents with fewer than `n` words have no n-grams and always pass.
A document passes when overlap_ratio < threshold (equal fails).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import PipelineConfig
from ..utils.text import ngram_tokens
from .ngram_store import NGramStore


@dataclass(frozen=True)
class DedupResult:
    passed: bool
    overlap_ratio: float
    total_ngrams: int
    duplicate_ngrams: int
    reason: Optional[str] = None
    # kept so an accepted document can be committed without re-tokenizing
    ngrams: List[str] = field(default_factory=list, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "overlap_ratio": float(self.overlap_ratio),
            "total_ngrams": self.total_ngrams,
            "duplicate_ngrams": self.duplicate_ngrams,
            "reason": self.reason,
        }


def generate_ngrams(text: str, n: int) -> List[str]:
    if n < 1:
        raise ValueError(f"n must be >= 1 (got {n})")
    words = ngram_tokens(text)
    return [" ".join(words[i:i + n]) for i in range(len(words) - n + 1)]


def check_duplicates(ngrams: List[str], store: NGramStore, threshold: float) -> DedupResult:
    total = len(ngrams)
    if total == 0:
        return DedupResult(True, 0.0, 0, 0, ngrams=ngrams)
    dup = sum(1 for g in ngrams if g in store)
    ratio = dup / total
    passed = ratio < threshold
    reason = None if passed else f"High n-gram overlap ratio: {ratio * 100:.1f}%"
    return DedupResult(passed, ratio, total, dup, reason, ngrams=ngrams)


def check_and_maybe_commit(
    text: str,
    config: PipelineConfig,
    store: NGramStore,
    *,
    commit: bool = True,
) -> DedupResult:
    """Check `text` against the store; if it passes and `commit` is set, record it.

    The dedup stage calls this with commit=False; the pipeline commits only
    after every stage has accepted the document.
    """
    result = check_duplicates(generate_ngrams(text, config.ngram_size), store, config.ngram_overlap_threshold)
    if commit and result.passed:
        store.commit(result.ngrams)
    return result
