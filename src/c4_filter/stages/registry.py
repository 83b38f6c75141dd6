"""Stage registry.

Stages are configured by name (`stages:` in build.yaml). Whatever order the
names are given in, they always run in the canonical order below: the dedup
gate must see only documents every other stage accepted, and the empty-text
gate must run before anything touches the text.
"""

from __future__ import annotations
from typing import List, Optional, Sequence

from ..config import PipelineConfig
from ..fingerprints.ngram_store import NGramStore
from ..lang.identify import LanguageClassifier
from .base import Stage
from .impl import EmptyTextGate, LanguageGate, NGramDedup, QualityGate

STAGE_ORDER = ("empty_text", "language", "quality", "dedup")

def make_stages(
    config: PipelineConfig,
    classifier: LanguageClassifier,
    store: NGramStore,
    stage_names: Optional[Sequence[str]] = None,
) -> List[Stage]:
    name_to_stage = {
        "empty_text": EmptyTextGate(),
        "language": LanguageGate(config, classifier),
        "quality": QualityGate(config),
        "dedup": NGramDedup(config, store),
    }
    wanted = list(stage_names) if stage_names is not None else list(STAGE_ORDER)
    for n in wanted:
        if n not in name_to_stage:
            raise ValueError(f"Unknown stage: {n}. Known stages: {', '.join(STAGE_ORDER)}")
    return [name_to_stage[n] for n in STAGE_ORDER if n in wanted]
