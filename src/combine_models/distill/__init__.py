"""Seeded resampling, oracle relabeling and the build orchestrator."""

from combine_models.distill.combined import CombinedModel
from combine_models.distill.config import ClassifierSpec, DistillationConfig, DistillationSettings
from combine_models.distill.engine import resample_relabel
from combine_models.distill.orchestrator import (
    BuildState,
    DistillationOrchestrator,
    build_combined_model,
    synthetic_size,
)
from combine_models.distill.sampler import SeededSampler

__all__ = [
    "BuildState",
    "ClassifierSpec",
    "CombinedModel",
    "DistillationConfig",
    "DistillationOrchestrator",
    "DistillationSettings",
    "SeededSampler",
    "build_combined_model",
    "resample_relabel",
    "synthetic_size",
]
