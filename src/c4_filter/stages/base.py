"""Stage plugin interface.

Stages must:
- accept the per-document PipelineResult
- return a Decision (accept/reject + reason)
- record their filter flag(s) and metrics on the result
- never mutate the Document itself, and never raise for bad input

Stages that keep cross-document state (dedup) must not change it in
`apply`; the pipeline calls `commit` once every stage has accepted.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from ..pipeline.context import Decision, PipelineResult

class Stage(ABC):
    name: str = "stage"
    layer: str = "filtering"

    @abstractmethod
    def apply(self, item: PipelineResult) -> Decision:
        ...

    def commit(self, item: PipelineResult) -> None:
        """Called for fully accepted documents. No-op for stateless stages."""
        return None
