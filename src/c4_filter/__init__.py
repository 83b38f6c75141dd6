"""c4_filter

C4-style document filtering and n-gram deduplication for LM training corpora.

Public API surface:
- c4_filter.CorpusPipeline : per-document / per-batch filtering with shared dedup state
- c4_filter.PipelineConfig : immutable thresholds with validated defaults
- c4_filter.lang : language identification (pluggable classifier)
- c4_filter.cli.main : CLI entrypoint

The core never fetches, strips HTML or persists anything; sources, writers and
the build runner are thin collaborators around it.
"""
from .config import PipelineConfig
from .errors import BatchAbortedError, ClassifierError, ConfigurationError
from .pipeline.context import BatchResult, Document, PipelineResult
from .pipeline.orchestrator import CorpusPipeline

__all__ = [
    "__version__",
    "BatchAbortedError",
    "BatchResult",
    "ClassifierError",
    "ConfigurationError",
    "CorpusPipeline",
    "Document",
    "PipelineConfig",
    "PipelineResult",
]
__version__ = "0.1.0"
