"""Language identification.

The statistical model is opaque: a LanguageClassifier returns a ranked list
of (ISO 639-3 code, confidence) pairs, best first. `identify_language`
applies the target-language / confidence policy on top and never raises.

Outcomes are kept distinct through LanguageStatus:
- accepted:          top candidate is a target language with enough confidence
- rejected:          detected, but not a target language or too unsure
- undetermined:      no candidates, or the top one is "und"
- classifier_error:  the classifier raised or returned malformed output

The default classifier wraps `langdetect` and maps its ISO 639-1 codes to 639-3.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging
import math

from ..config import PipelineConfig
from ..errors import ClassifierError

log = logging.getLogger("c4_filter.lang")

UNDETERMINED = "und"
TOP_CANDIDATES = 3

Candidate = Tuple[str, float]


class LanguageStatus(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    UNDETERMINED = "undetermined"
    CLASSIFIER_ERROR = "classifier_error"


@dataclass(frozen=True)
class LanguageResult:
    passed: bool
    detected: str
    confidence: float
    status: LanguageStatus
    top_candidates: List[Candidate] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.status is LanguageStatus.CLASSIFIER_ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "detected": self.detected,
            "confidence": float(self.confidence),
            "status": self.status.value,
            "top_candidates": [
                {"language": lang, "confidence": float(conf)} for lang, conf in self.top_candidates
            ],
            "reason": self.reason,
        }


class LanguageClassifier(ABC):
    """Ranks candidate languages for a text. May raise; callers handle it."""

    name: str = "classifier"

    @abstractmethod
    def rank(self, text: str) -> List[Candidate]:
        ...


# langdetect profile codes -> ISO 639-3
ISO639_1_TO_3 = {
    "af": "afr", "ar": "ara", "bg": "bul", "bn": "ben", "ca": "cat", "cs": "ces",
    "cy": "cym", "da": "dan", "de": "deu", "el": "ell", "en": "eng", "es": "spa",
    "et": "est", "fa": "fas", "fi": "fin", "fr": "fra", "gu": "guj", "he": "heb",
    "hi": "hin", "hr": "hrv", "hu": "hun", "id": "ind", "it": "ita", "ja": "jpn",
    "kn": "kan", "ko": "kor", "lt": "lit", "lv": "lav", "mk": "mkd", "ml": "mal",
    "mr": "mar", "ne": "nep", "nl": "nld", "no": "nor", "pa": "pan", "pl": "pol",
    "pt": "por", "ro": "ron", "ru": "rus", "sk": "slk", "sl": "slv", "so": "som",
    "sq": "sqi", "sv": "swe", "sw": "swa", "ta": "tam", "te": "tel", "th": "tha",
    "tl": "tgl", "tr": "tur", "uk": "ukr", "ur": "urd", "vi": "vie",
    "zh-cn": "cmn", "zh-tw": "cmn",
}


class LangdetectClassifier(LanguageClassifier):
    """`langdetect.detect_langs` with a fixed seed and 639-3 codes.

    Texts shorter than `min_length` characters (after stripping), and texts
    langdetect finds no features in, are reported as undetermined.
    """

    name = "langdetect"

    def __init__(self, min_length: int = 10, seed: int = 0):
        from langdetect import DetectorFactory

        DetectorFactory.seed = seed
        self.min_length = int(min_length)

    def rank(self, text: str) -> List[Candidate]:
        from langdetect import LangDetectException, detect_langs

        if len(text.strip()) < self.min_length:
            return [(UNDETERMINED, 1.0)]
        try:
            langs = detect_langs(text)
        except LangDetectException as e:
            # "No features in text": digits / punctuation only
            log.debug(f"langdetect found nothing to rank: {e}")
            return []
        merged: Dict[str, float] = {}
        for lp in langs:
            code = ISO639_1_TO_3.get(lp.lang, lp.lang)
            merged[code] = merged.get(code, 0.0) + float(lp.prob)
        return sorted(merged.items(), key=lambda kv: -kv[1])


def _validate_candidates(raw: Any) -> List[Candidate]:
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise ClassifierError(f"expected a list of (code, confidence), got {type(raw).__name__}")
    out: List[Candidate] = []
    for item in raw:
        try:
            code, conf = item
            conf = float(conf)
        except (TypeError, ValueError) as e:
            raise ClassifierError(f"malformed candidate {item!r}") from e
        if not isinstance(code, str) or math.isnan(conf):
            raise ClassifierError(f"malformed candidate {item!r}")
        out.append((code, conf))
    return out


def identify_language(
    text: str,
    config: PipelineConfig,
    classifier: LanguageClassifier,
) -> LanguageResult:
    try:
        candidates = _validate_candidates(classifier.rank(text))
    except MemoryError:
        raise
    except Exception as e:
        log.warning(f"Language classifier {getattr(classifier, 'name', '?')} failed: {e}")
        return LanguageResult(
            passed=False,
            detected="error",
            confidence=0.0,
            status=LanguageStatus.CLASSIFIER_ERROR,
            reason=f"Language detection error: {e}",
        )

    if not candidates or candidates[0][0] == UNDETERMINED:
        return LanguageResult(
            passed=False,
            detected="undetermined",
            confidence=0.0,
            status=LanguageStatus.UNDETERMINED,
            reason="Could not determine language",
        )

    detected, confidence = candidates[0]
    passed = detected in config.target_languages and confidence >= config.min_language_confidence
    reason = None
    if not passed:
        reason = (
            f"Language {detected} not in target languages or low confidence ({confidence:.2f})"
        )
    return LanguageResult(
        passed=passed,
        detected=detected,
        confidence=confidence,
        status=LanguageStatus.ACCEPTED if passed else LanguageStatus.REJECTED,
        top_candidates=candidates[:TOP_CANDIDATES],
        reason=reason,
    )
