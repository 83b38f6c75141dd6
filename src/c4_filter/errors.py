"""Exception types.

Per-document problems (empty text, non-target language, low quality,
duplicates, classifier failures) are reported as data on PipelineResult.
Only the errors below ever cross a public boundary:

- ConfigurationError: invalid thresholds, raised at PipelineConfig construction
- BatchAbortedError: a resource failure stopped a batch; carries the partial result
- StateOwnershipError: an NGramStore was handed to a second pipeline without release
- ClassifierError: raised by classifier adapters, always caught by the identifier
"""

from __future__ import annotations
from typing import Any, List, Optional


class C4FilterError(Exception):
    """Base class for all c4_filter errors."""


class ConfigurationError(C4FilterError, ValueError):
    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("invalid pipeline configuration: " + "; ".join(self.problems))


class ClassifierError(C4FilterError):
    """The language classifier failed or returned malformed output."""


class StateOwnershipError(C4FilterError):
    pass


class BatchAbortedError(C4FilterError):
    def __init__(self, message: str, partial: Any, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.partial = partial
        self.cause = cause
