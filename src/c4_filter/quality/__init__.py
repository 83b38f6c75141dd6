"""Quality heuristics: text statistics and threshold flags."""

from .metrics import TextMetrics, compute_metrics
from .filters import QUALITY_FILTERS, apply_quality_filters, quality_failed

__all__ = [
    "QUALITY_FILTERS",
    "TextMetrics",
    "apply_quality_filters",
    "compute_metrics",
    "quality_failed",
]
