"""Unit tests for language identification policy."""

from __future__ import annotations

import pytest

from c4_filter.config import PipelineConfig
from c4_filter.errors import ClassifierError
from c4_filter.lang.identify import (
    LangdetectClassifier,
    LanguageStatus,
    identify_language,
)

from conftest import ScriptedClassifier

CFG = PipelineConfig(target_languages={"eng"}, min_language_confidence=0.5)


def test_target_language_passes():
    res = identify_language("some text", CFG, ScriptedClassifier([("eng", 0.9)]))
    assert res.passed
    assert res.status is LanguageStatus.ACCEPTED
    assert res.detected == "eng"
    assert res.confidence == 0.9
    assert res.reason is None


def test_non_target_language_rejected():
    res = identify_language("texte", CFG, ScriptedClassifier([("fra", 0.95)]))
    assert not res.passed
    assert res.status is LanguageStatus.REJECTED
    assert res.detected == "fra"
    assert res.confidence == 0.95
    assert "fra" in res.reason


def test_low_confidence_rejected():
    res = identify_language("text", CFG, ScriptedClassifier([("eng", 0.4)]))
    assert not res.passed
    assert res.status is LanguageStatus.REJECTED


def test_confidence_threshold_is_inclusive():
    res = identify_language("text", CFG, ScriptedClassifier([("eng", 0.5)]))
    assert res.passed


@pytest.mark.parametrize("candidates", [[], [("und", 1.0)], [("und", 0.6), ("eng", 0.4)]])
def test_undetermined(candidates):
    res = identify_language("??", CFG, ScriptedClassifier(candidates))
    assert not res.passed
    assert res.status is LanguageStatus.UNDETERMINED
    assert res.detected == "undetermined"
    assert res.confidence == 0.0


def test_classifier_exception_is_converted():
    clf = ScriptedClassifier(rules={"boom": RuntimeError("model not loaded")})
    res = identify_language("boom", CFG, clf)
    assert not res.passed
    assert res.is_error
    assert res.status is LanguageStatus.CLASSIFIER_ERROR
    assert res.detected == "error"
    assert res.confidence == 0.0
    assert "model not loaded" in res.reason


@pytest.mark.parametrize("bad", [["eng"], [("eng", "high")], "eng", [(1, 0.5)]])
def test_malformed_output_is_classifier_error(bad):
    res = identify_language("text", CFG, ScriptedClassifier(bad))
    assert res.status is LanguageStatus.CLASSIFIER_ERROR


def test_error_and_mismatch_are_distinct():
    mismatch = identify_language("x", CFG, ScriptedClassifier([("deu", 0.99)]))
    error = identify_language("x", CFG, ScriptedClassifier(rules={"x": ClassifierError("bad")}))
    assert mismatch.status != error.status
    assert not mismatch.is_error and error.is_error


def test_keeps_top_three_candidates():
    cands = [("eng", 0.7), ("sco", 0.2), ("deu", 0.05), ("nld", 0.05)]
    res = identify_language("text", CFG, ScriptedClassifier(cands))
    assert res.top_candidates == cands[:3]
    d = res.to_dict()
    assert d["top_candidates"][0] == {"language": "eng", "confidence": 0.7}
    assert d["status"] == "accepted"


class TestLangdetectClassifier:
    def test_short_text_is_undetermined(self):
        clf = LangdetectClassifier(min_length=10)
        assert clf.rank("hi there") == [("und", 1.0)]

    def test_no_features_gives_no_candidates(self):
        clf = LangdetectClassifier()
        assert clf.rank("12345 67890 11111 22222") == []

    def test_english_maps_to_iso639_3(self, good_text):
        clf = LangdetectClassifier()
        ranked = clf.rank(good_text * 3)
        assert ranked[0][0] == "eng"
        assert ranked[0][1] > 0.9
