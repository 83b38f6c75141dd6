"""N-gram fingerprints: generation, overlap checks and the accepted-key store."""

from .ngram_store import NGramStore
from .ngrams import DedupResult, check_and_maybe_commit, check_duplicates, generate_ngrams

__all__ = [
    "DedupResult",
    "NGramStore",
    "check_and_maybe_commit",
    "check_duplicates",
    "generate_ngrams",
]
