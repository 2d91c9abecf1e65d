from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from combine_models.distill.config import DistillationSettings
from combine_models.utils.io import load_yaml


@dataclass
class Config:
    raw: dict[str, Any]

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        return cls(raw=load_yaml(path))

    def distillation(self) -> DistillationSettings:
        """Settings under the ``distillation`` key, or the whole file if absent."""
        section = self.raw.get("distillation", self.raw)
        return DistillationSettings.from_mapping(section)
