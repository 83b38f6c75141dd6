"""Document source interface.

A source turns some external dump (crawler output, JSONL exports) into a
stream of Documents for the pipeline. Sources never filter: empty or odd
records are passed through and rejected by the pipeline, so they show up in
the rejection log.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

from ..pipeline.context import Document

@dataclass
class SourceSpec:
    name: str
    dataset: Union[str, List[str]]   # file, directory, glob pattern, or list of those
    kind: str = "local_jsonl"
    text_field: Optional[str] = None  # None = first non-empty of filtered_text / filteredText / text

class DataSource:
    """Base interface for all sources."""
    name: str

    def metadata(self) -> Dict[str, Any]:
        return {}

    def stream(self) -> Iterable[Document]:
        raise NotImplementedError
