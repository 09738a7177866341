# specflow/approvals/catalog.py
"""
Approval catalog.

Architecture patterns and dependency presets, loaded from catalog.yml into
pydantic models once per process.
"""
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field

from specflow.core.logging import log


CATALOG_PATH = Path(__file__).parent / "catalog.yml"

Platform = Literal["web", "mobile"]


class ArchitecturePattern(BaseModel):
    id: str
    name: str
    description: str
    pattern_type: str
    platform: Platform = "web"
    stack_examples: List[str] = Field(default_factory=list)
    characteristics: Dict[str, str] = Field(default_factory=dict)
    best_for: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    tradeoffs: List[str] = Field(default_factory=list)
    dau_range: str = ""


class DependencyPreset(BaseModel):
    id: str
    title: str
    summary: str
    frontend: str
    backend: str
    database: str
    deployment: str
    dependencies: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)


class Catalog(BaseModel):
    patterns: List[ArchitecturePattern]
    presets: Dict[Platform, List[DependencyPreset]]

    def get_pattern(self, pattern_id: str) -> Optional[ArchitecturePattern]:
        return next((p for p in self.patterns if p.id == pattern_id), None)

    def get_preset(self, preset_id: str) -> Optional[DependencyPreset]:
        for presets in self.presets.values():
            for preset in presets:
                if preset.id == preset_id:
                    return preset
        return None

    def presets_for(self, platform: Optional[str] = None) -> Dict[str, List[DependencyPreset]]:
        if platform:
            return {platform: self.presets.get(platform, [])}
        return dict(self.presets)


def load_catalog(path: Optional[Path] = None) -> Catalog:
    path = path or CATALOG_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    catalog = Catalog.model_validate(data)
    log("PHASE_SPEC", f"Loaded {len(catalog.patterns)} architecture patterns, "
        f"{sum(len(p) for p in catalog.presets.values())} dependency presets")
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    return load_catalog()
