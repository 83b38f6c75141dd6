"""Lexical / structural statistics for one document.

`compute_metrics` is pure: same text in, same TextMetrics out. Every ratio
with a zero denominator is 0.0, so empty or whitespace-only input is safe.
Letter and digit counts are ASCII-only (`[A-Za-z]`, `[0-9]`); whitespace is
anything `str.isspace` accepts. Everything else counts as a symbol.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Any, Dict

from ..utils.text import (
    ends_with_punctuation,
    has_ellipsis,
    is_bullet_line,
    split_lines,
    split_words,
)


@dataclass(frozen=True)
class TextMetrics:
    text_length: int
    word_count: int
    unique_word_count: int
    line_count: int
    avg_word_length: float
    unique_words_ratio: float
    digit_ratio: float
    uppercase_ratio: float
    symbol_to_word_ratio: float
    lines_ending_with_punctuation_ratio: float
    bullet_point_ratio: float
    ellipsis_line_ratio: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _ratio(num: float, den: float) -> float:
    return num / den if den else 0.0


def compute_metrics(text: str) -> TextMetrics:
    words = split_words(text)
    lines = split_lines(text)
    unique = {w.lower() for w in words}

    total_chars = len(text)
    alpha = digits = upper = space = 0
    for ch in text:
        if ch.isascii() and ch.isalpha():
            alpha += 1
            if ch.isupper():
                upper += 1
        elif "0" <= ch <= "9":
            digits += 1
        elif ch.isspace():
            space += 1
    symbols = total_chars - alpha - digits - space

    punct_lines = sum(1 for line in lines if ends_with_punctuation(line))
    bullet_lines = sum(1 for line in lines if is_bullet_line(line))
    ellipsis_lines = sum(1 for line in lines if has_ellipsis(line))

    n_words = len(words)
    n_lines = len(lines)
    return TextMetrics(
        text_length=total_chars,
        word_count=n_words,
        unique_word_count=len(unique),
        line_count=n_lines,
        avg_word_length=_ratio(sum(len(w) for w in words), n_words),
        unique_words_ratio=_ratio(len(unique), n_words),
        digit_ratio=_ratio(digits, total_chars),
        uppercase_ratio=_ratio(upper, alpha),
        symbol_to_word_ratio=_ratio(symbols, n_words),
        lines_ending_with_punctuation_ratio=_ratio(punct_lines, n_lines),
        bullet_point_ratio=_ratio(bullet_lines, n_lines),
        ellipsis_line_ratio=_ratio(ellipsis_lines, n_lines),
    )
