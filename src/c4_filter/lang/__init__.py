"""Language identification: pluggable classifier + target-language policy."""

from .identify import (
    LangdetectClassifier,
    LanguageClassifier,
    LanguageResult,
    LanguageStatus,
    identify_language,
)

__all__ = [
    "LangdetectClassifier",
    "LanguageClassifier",
    "LanguageResult",
    "LanguageStatus",
    "identify_language",
]
