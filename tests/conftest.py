"""Shared fixtures.

Tests never rely on the statistical language model: ScriptedClassifier
returns canned candidates, chosen by substring rules.
"""

from __future__ import annotations

import pytest

from c4_filter.config import PipelineConfig
from c4_filter.lang.identify import LanguageClassifier
from c4_filter.pipeline.orchestrator import CorpusPipeline

GOOD_TEXT = (
    "The quiet river winds through the green valley near our small town. "
    "Farmers grow wheat and barley along its banks every summer. "
    "Children often swim there when the afternoon heat becomes unbearable."
)

OTHER_GOOD_TEXT = (
    "Mountain trails offer hikers a chance to escape busy city streets. "
    "Many visitors bring cameras to capture distant peaks and wildflowers. "
    "Rangers ask everyone to stay on marked paths for safety."
)

FRENCH_TEXT = (
    "Le petit village se trouve au bord de la rivière et les enfants jouent "
    "souvent près de l'eau pendant les longues journées de l'été."
)


class ScriptedClassifier(LanguageClassifier):
    name = "scripted"

    def __init__(self, default=(("eng", 0.99),), rules=None):
        self.default = list(default)
        self.rules = dict(rules or {})
        self.calls = 0

    def rank(self, text):
        self.calls += 1
        for needle, out in self.rules.items():
            if needle in text:
                if isinstance(out, BaseException):
                    raise out
                return list(out)
        return list(self.default)


@pytest.fixture
def classifier():
    return ScriptedClassifier(rules={"village": [("fra", 0.95), ("eng", 0.03)]})


@pytest.fixture
def config():
    return PipelineConfig.from_dict({
        "target_languages": ["eng"],
        "min_text_length": 50,
        "min_word_count": 10,
        "ngram_size": 5,
        "ngram_overlap_threshold": 0.8,
        "max_symbol_to_word_ratio": 1.0,
        "min_lines_ending_with_punctuation": 0.3,
    })


@pytest.fixture
def pipeline(config, classifier):
    p = CorpusPipeline(config, classifier=classifier)
    yield p
    p.close()


@pytest.fixture
def good_text():
    return GOOD_TEXT


@pytest.fixture
def other_text():
    return OTHER_GOOD_TEXT


@pytest.fixture
def french_text():
    return FRENCH_TEXT
