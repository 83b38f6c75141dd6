"""Source registry.

Built-in sources are keyed by `kind`; `register_source` adds more at runtime
(tests and notebooks use it for in-memory sources).
"""

from __future__ import annotations
from typing import Callable, Dict, List
from .base import DataSource, SourceSpec
from .local_jsonl import LocalJSONLSource

_REGISTRY: Dict[str, Callable[[SourceSpec], DataSource]] = {
    "local_jsonl": LocalJSONLSource,
}

def register_source(kind: str, factory: Callable[[SourceSpec], DataSource]) -> None:
    if kind in _REGISTRY:
        raise ValueError(f"Source kind '{kind}' already registered")
    _REGISTRY[kind] = factory

def list_sources() -> List[str]:
    return sorted(_REGISTRY)

def make_source(spec: SourceSpec) -> DataSource:
    if spec.kind not in _REGISTRY:
        raise KeyError(f"Unknown source kind: {spec.kind}. Available: {list_sources()}")
    return _REGISTRY[spec.kind](spec)
