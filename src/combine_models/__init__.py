"""
combine-models: collapse an ensemble into a single surrogate model.

This package is organized into:
- data: instances, datasets and their attribute schema
- models: the classifier contract, scikit-learn adapters and the factory
- distill: seeded resampling, relabeling and the build orchestrator
- utils: configuration, I/O and logging helpers
"""

from combine_models.distill.combined import CombinedModel
from combine_models.distill.config import DistillationConfig
from combine_models.distill.orchestrator import DistillationOrchestrator, build_combined_model

__version__ = "0.1.0"
__all__ = [
    "CombinedModel",
    "DistillationConfig",
    "DistillationOrchestrator",
    "build_combined_model",
]
