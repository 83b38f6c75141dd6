"""Threshold checks over TextMetrics.

Each entry is a *failed* flag (True = document fails that heuristic). All
flags are always evaluated so batch statistics see every simultaneous
quality failure, even though the pipeline rejects on the group as a whole.
"""

from __future__ import annotations
from typing import Dict, Mapping

from ..config import PipelineConfig
from .metrics import TextMetrics

QUALITY_FILTERS = (
    "too_short",
    "too_long",
    "too_few_words",
    "words_too_short",
    "words_too_long",
    "insufficient_punctuation",
    "too_many_bullets",
    "too_many_ellipsis",
    "too_many_symbols",
    "too_many_digits",
    "too_many_uppercase",
    "insufficient_variety",
)


def apply_quality_filters(metrics: TextMetrics, config: PipelineConfig) -> Dict[str, bool]:
    m, c = metrics, config
    return {
        "too_short": m.text_length < c.min_text_length,
        "too_long": m.text_length > c.max_text_length,
        "too_few_words": m.word_count < c.min_word_count,
        "words_too_short": m.avg_word_length < c.min_avg_word_length,
        "words_too_long": m.avg_word_length > c.max_avg_word_length,
        "insufficient_punctuation": m.lines_ending_with_punctuation_ratio < c.min_lines_ending_with_punctuation,
        "too_many_bullets": m.bullet_point_ratio > c.max_bullet_point_ratio,
        "too_many_ellipsis": m.ellipsis_line_ratio > c.max_ellipsis_line_ratio,
        "too_many_symbols": m.symbol_to_word_ratio > c.max_symbol_to_word_ratio,
        "too_many_digits": m.digit_ratio > c.max_digit_ratio,
        "too_many_uppercase": m.uppercase_ratio > c.max_uppercase_ratio,
        "insufficient_variety": m.unique_words_ratio < c.min_unique_words_ratio,
    }


def quality_failed(outcome: Mapping[str, bool]) -> bool:
    return any(outcome.values())


def failed_filters(outcome: Mapping[str, bool]) -> list:
    return [name for name, failed in outcome.items() if failed]
