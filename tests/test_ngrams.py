"""Unit tests for n-gram generation, overlap checks and the store."""

from __future__ import annotations

import pytest

from c4_filter.config import PipelineConfig
from c4_filter.errors import StateOwnershipError
from c4_filter.fingerprints import (
    NGramStore,
    check_and_maybe_commit,
    check_duplicates,
    generate_ngrams,
)


class TestGenerateNgrams:
    def test_sliding_windows(self):
        assert generate_ngrams("one two three four five six seven", 3) == [
            "one two three",
            "two three four",
            "three four five",
            "four five six",
            "five six seven",
        ]

    def test_lowercases_and_collapses_whitespace(self):
        assert generate_ngrams("The  CAT\n\tsat.", 2) == ["the cat", "cat sat."]

    def test_shorter_than_n(self):
        assert generate_ngrams("only two", 3) == []
        assert generate_ngrams("", 1) == []

    def test_exactly_n_words(self):
        assert generate_ngrams("a b c", 3) == ["a b c"]

    def test_keeps_repeated_windows(self):
        assert generate_ngrams("a b a b", 2) == ["a b", "b a", "a b"]

    def test_invalid_n(self):
        with pytest.raises(ValueError):
            generate_ngrams("a b", 0)


class TestCheckDuplicates:
    def test_empty_store(self):
        res = check_duplicates(["a b", "b c"], NGramStore(), 0.8)
        assert res.passed
        assert res.overlap_ratio == 0.0
        assert res.total_ngrams == 2
        assert res.duplicate_ngrams == 0
        assert res.reason is None

    def test_no_ngrams_always_passes(self):
        store = NGramStore()
        store.commit(["a b"])
        res = check_duplicates([], store, 0.0)
        assert res.passed
        assert res.overlap_ratio == 0.0
        assert res.total_ngrams == 0

    def test_counts_with_multiplicity(self):
        store = NGramStore()
        store.commit(["a b"])
        res = check_duplicates(generate_ngrams("a b a b", 2), store, 0.8)
        assert res.duplicate_ngrams == 2
        assert res.total_ngrams == 3
        assert res.overlap_ratio == pytest.approx(2 / 3)
        assert res.passed

    def test_exact_threshold_fails(self):
        store = NGramStore()
        store.commit(["alpha", "beta"])
        res = check_duplicates(generate_ngrams("alpha gamma", 1), store, 0.5)
        assert res.overlap_ratio == 0.5
        assert not res.passed
        assert "50.0%" in res.reason

    def test_does_not_mutate_store(self):
        store = NGramStore()
        check_duplicates(["x y"], store, 0.8)
        assert store.size == 0
        assert store.processed_documents == 0


class TestCheckAndMaybeCommit:
    def test_commits_on_pass(self):
        cfg = PipelineConfig(ngram_size=2)
        store = NGramStore()
        res = check_and_maybe_commit("a b a b c", cfg, store)
        assert res.passed
        # set semantics: "a b" appears twice, stored once
        assert store.seen == {"a b", "b a", "b c"}
        assert store.processed_documents == 1

    def test_second_copy_is_duplicate_and_not_committed(self):
        cfg = PipelineConfig(ngram_size=2)
        store = NGramStore()
        check_and_maybe_commit("a b c d", cfg, store)
        res = check_and_maybe_commit("a b c d", cfg, store)
        assert not res.passed
        assert res.overlap_ratio == 1.0
        assert store.processed_documents == 1

    def test_commit_false_leaves_store_alone(self):
        store = NGramStore()
        res = check_and_maybe_commit("a b c d", PipelineConfig(ngram_size=2), store, commit=False)
        assert res.passed
        assert store.size == 0


class TestNGramStore:
    def test_clear_resets_keys_and_counter(self):
        store = NGramStore()
        store.commit(["a", "b"])
        store.commit(["b", "c"])
        assert len(store) == 3
        assert store.processed_documents == 2
        assert store.estimated_bytes() == 300
        store.clear()
        assert store.size == 0
        assert store.processed_documents == 0

    def test_single_owner(self):
        store = NGramStore()
        a, b = object(), object()
        store.acquire(a)
        store.acquire(a)
        with pytest.raises(StateOwnershipError):
            store.acquire(b)
        store.release()
        store.acquire(b)
        assert store.owned
