"""In-memory store of accepted n-gram keys.

One store belongs to exactly one pipeline. It only grows (set semantics)
until `clear()`, which drops the keys and the processed-document counter
together. Memory is unbounded; watch `size` / `estimated_bytes()`
and reset when needed.

Writers (`add`, `count_document`, `commit`, `clear`) are serialised by a
lock so a host that runs language / quality checks in parallel still has a
single writer at a time.
Handing a store to another pipeline requires `release()` first.
"""

from __future__ import annotations
from typing import Iterable, Optional, Set
import threading

from ..errors import StateOwnershipError

# rough per-key cost (str object + set slot); matches the historical estimate
BYTES_PER_NGRAM = 100


class NGramStore:
    def __init__(self) -> None:
        self.seen: Set[str] = set()
        self.processed_documents = 0
        self._lock = threading.Lock()
        self._owner: Optional[int] = None

    # ownership
    def acquire(self, owner: object) -> None:
        with self._lock:
            if self._owner is not None and self._owner != id(owner):
                raise StateOwnershipError("NGramStore is already owned by another pipeline; release() it first")
            self._owner = id(owner)

    def release(self) -> None:
        with self._lock:
            self._owner = None

    @property
    def owned(self) -> bool:
        return self._owner is not None

    # reads
    def __contains__(self, key: str) -> bool:
        return key in self.seen

    def __len__(self) -> int:
        return len(self.seen)

    @property
    def size(self) -> int:
        return len(self.seen)

    def estimated_bytes(self) -> int:
        return len(self.seen) * BYTES_PER_NGRAM

    # writes
    def add(self, ngrams: Iterable[str]) -> None:
        with self._lock:
            self.seen.update(ngrams)

    def count_document(self) -> None:
        with self._lock:
            self.processed_documents += 1

    def commit(self, ngrams: Iterable[str]) -> None:
        """Insert one accepted document's n-grams and count the document."""
        with self._lock:
            self.seen.update(ngrams)
            self.processed_documents += 1

    def clear(self) -> None:
        with self._lock:
            self.seen = set()
            self.processed_documents = 0
