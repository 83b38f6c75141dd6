"""Tokenization and cheap line classifiers shared by metrics and n-grams."""

from __future__ import annotations
import re
from typing import List

BULLET_GLYPHS = "-•*▪▫◦◘◙○●"

_BULLET_RE = re.compile(r"^\s*[" + re.escape(BULLET_GLYPHS) + r"]")
_ELLIPSIS_RE = re.compile(r"\.{2,}")
_PUNCT_END = (".", "!", "?")


def split_words(text: str) -> List[str]:
    """Non-empty whitespace-delimited tokens, case and punctuation kept."""
    return text.split()


def split_lines(text: str) -> List[str]:
    """Lines (split on '\\n') that are not blank after trimming. Untrimmed."""
    return [line for line in text.split("\n") if line.strip()]


def ngram_tokens(text: str) -> List[str]:
    """Lowercased word sequence used for n-gram keys."""
    return text.lower().split()


def ends_with_punctuation(line: str) -> bool:
    return line.strip().endswith(_PUNCT_END)


def is_bullet_line(line: str) -> bool:
    return _BULLET_RE.match(line) is not None


def has_ellipsis(line: str) -> bool:
    return _ELLIPSIS_RE.search(line) is not None
