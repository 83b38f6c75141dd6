"""Pipeline configuration.

PipelineConfig is a frozen, fully enumerated set of thresholds. It is built
once per pipeline and never mutated; `dataclasses.replace` gives a new one.

Policy for external option mappings (YAML, JSON, dicts):
- snake_case and the legacy camelCase option names are both accepted
- unknown keys are ignored and logged, so newer configs still load
- missing keys fall back to the defaults below
- explicit zero / empty values are kept as given (no truthiness fallback)

All values are validated eagerly; any violation raises ConfigurationError
listing every problem found.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from collections.abc import Iterable
from typing import Any, Dict, FrozenSet, List, Mapping
import logging
import re

from .errors import ConfigurationError

log = logging.getLogger("c4_filter.config")

_RATIO_FIELDS = (
    "min_language_confidence",
    "min_lines_ending_with_punctuation",
    "max_bullet_point_ratio",
    "max_ellipsis_line_ratio",
    "max_digit_ratio",
    "max_uppercase_ratio",
    "min_unique_words_ratio",
    "ngram_overlap_threshold",
)

_NON_NEGATIVE_FIELDS = (
    "min_text_length",
    "max_text_length",
    "min_word_count",
    "min_avg_word_length",
    "max_avg_word_length",
    "max_symbol_to_word_ratio",
)

_MIN_MAX_PAIRS = (
    ("min_text_length", "max_text_length"),
    ("min_avg_word_length", "max_avg_word_length"),
)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    # minAvgWordLength -> min_avg_word_length, ngramSize -> ngram_size
    return _CAMEL_RE.sub("_", key).lower()


@dataclass(frozen=True)
class PipelineConfig:
    # language
    target_languages: FrozenSet[str] = field(default_factory=lambda: frozenset({"eng"}))
    min_language_confidence: float = 0.5

    # length / words
    min_text_length: int = 100
    max_text_length: int = 100_000
    min_word_count: int = 20
    min_avg_word_length: float = 3
    max_avg_word_length: float = 15

    # line-based heuristics
    min_lines_ending_with_punctuation: float = 0.5
    max_bullet_point_ratio: float = 0.5
    max_ellipsis_line_ratio: float = 0.3

    # character heuristics
    max_symbol_to_word_ratio: float = 0.1
    max_digit_ratio: float = 0.15
    max_uppercase_ratio: float = 0.2

    # variety
    min_unique_words_ratio: float = 0.3

    # n-gram dedup
    ngram_size: int = 13
    ngram_overlap_threshold: float = 0.8

    def __post_init__(self) -> None:
        langs = self.target_languages
        if isinstance(langs, str):
            langs = [langs]
        # anything else (None, numbers) is left as is and reported by validate()
        if isinstance(langs, Iterable):
            object.__setattr__(self, "target_languages", frozenset(str(x) for x in langs))
        problems = self.validate()
        if problems:
            raise ConfigurationError(problems)

    def validate(self) -> List[str]:
        problems: List[str] = []
        langs = self.target_languages
        if not isinstance(langs, frozenset):
            problems.append(f"target_languages must be a language code or a list of codes (got {langs!r})")
        elif not langs:
            problems.append("target_languages must not be empty")

        n = self.ngram_size
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            problems.append(f"ngram_size must be an integer >= 1 (got {n!r})")

        for name in _RATIO_FIELDS:
            v = getattr(self, name)
            if not _is_number(v) or not (0.0 <= v <= 1.0):
                problems.append(f"{name} must be a number in [0, 1] (got {v!r})")

        for name in _NON_NEGATIVE_FIELDS:
            v = getattr(self, name)
            if not _is_number(v) or v < 0:
                problems.append(f"{name} must be a non-negative number (got {v!r})")

        for lo, hi in _MIN_MAX_PAIRS:
            a, b = getattr(self, lo), getattr(self, hi)
            if _is_number(a) and _is_number(b) and a > b:
                problems.append(f"{lo} ({a}) must not exceed {hi} ({b})")
        return problems

    @classmethod
    def option_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, options: Mapping[str, Any] | None) -> "PipelineConfig":
        """Build a config from a flat option mapping.

        Keys may be snake_case (`min_word_count`) or camelCase (`minWordCount`).
        Unknown keys are logged and ignored.
        """
        known = set(cls.option_names())
        kwargs: Dict[str, Any] = {}
        ignored: List[str] = []
        for key, value in (options or {}).items():
            name = key if key in known else _snake(str(key))
            if name not in known:
                ignored.append(str(key))
                continue
            kwargs[name] = value
        if ignored:
            log.warning(f"Ignoring unknown pipeline options: {', '.join(sorted(ignored))}")
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out = {f.name: getattr(self, f.name) for f in fields(self)}
        out["target_languages"] = sorted(self.target_languages)
        return out


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)
