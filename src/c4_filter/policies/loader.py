"""Policy / config loader.

Pipeline thresholds live in YAML so they can be reviewed and versioned
alongside the runs that used them. A file may hold the options at top level
or under a `pipeline:` section (the layout build.yaml uses).
"""

from __future__ import annotations
from typing import Any, Dict
import yaml

from ..config import PipelineConfig

def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}

def config_from_mapping(data: Dict[str, Any]) -> PipelineConfig:
    section = data.get("pipeline", data) if isinstance(data, dict) else {}
    return PipelineConfig.from_dict(section or {})

def load_config(path: str) -> PipelineConfig:
    return config_from_mapping(load_yaml(path))
