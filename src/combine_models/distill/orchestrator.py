"""Build a combined model: train meta, resample and relabel, train surrogate.

Usage
-----
::

    from combine_models.distill.config import DistillationSettings
    from combine_models.distill.orchestrator import DistillationOrchestrator

    config = DistillationSettings(resample_percent=200, seed=7).to_config()
    orchestrator = DistillationOrchestrator()
    model = orchestrator.build(dataset, config)
    label = orchestrator.predict(model, dataset[0])
"""

from __future__ import annotations

import math
from collections import Counter
from decimal import Decimal
from enum import Enum

from combine_models.data.schemas import Dataset, Instance
from combine_models.distill.combined import CombinedModel
from combine_models.distill.config import DistillationConfig
from combine_models.distill.engine import DEFAULT_BATCH_SIZE, resample_relabel
from combine_models.distill.sampler import SeededSampler
from combine_models.errors import InvalidConfiguration, NotTrained
from combine_models.utils.logging import get_logger

logger = get_logger(__name__)


class BuildState(str, Enum):
    UNBUILT = "unbuilt"
    META_TRAINING = "meta_training"
    RESAMPLING = "resampling"
    SURROGATE_TRAINING = "surrogate_training"
    READY = "ready"
    FAILED = "failed"


def synthetic_size(n_source: int, resample_fraction: float) -> int:
    """``floor(n_source * resample_fraction)``.

    The fraction is taken at its shortest decimal representation, so e.g.
    29% of 100 is 29 rather than 28.
    """
    n = math.floor(Decimal(n_source) * Decimal(repr(float(resample_fraction))))
    if n < 0:
        raise InvalidConfiguration(
            f"Synthetic dataset size would be negative ({n_source} x {resample_fraction})"
        )
    return int(n)


class DistillationOrchestrator:
    """Sequences one build at a time and tracks its lifecycle state.

    Steps run in a fixed order: the meta-classifier is trained on the
    untouched dataset, a fresh ``SeededSampler`` drives resampling and
    relabeling, then the surrogate is trained on the synthetic dataset. Any
    error aborts the build, leaves the state at ``FAILED`` and is re-raised
    unchanged. Nothing is cached between builds.
    """

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        self.batch_size = batch_size
        self.state = BuildState.UNBUILT
        self.model: CombinedModel | None = None

    def _enter(self, state: BuildState) -> None:
        logger.debug("Build state %s -> %s", self.state.value, state.value)
        self.state = state

    def build(self, dataset: Dataset, config: DistillationConfig) -> CombinedModel:
        """Train a combined model on *dataset*.

        Args:
            dataset: Caller-owned training data; never mutated.
            config: Validated distillation settings.

        Returns:
            The ``CombinedModel`` wrapping the trained surrogate.

        Raises:
            TrainingError: If the meta or surrogate classifier fails to train.
            PredictionError: If the meta-classifier fails while relabeling.
            InvalidConfiguration: If the derived synthetic size is invalid.
        """
        self.model = None
        self.state = BuildState.UNBUILT
        try:
            n = synthetic_size(len(dataset), config.resample_fraction)
            meta = config.meta.fresh()
            surrogate = config.surrogate.fresh()

            self._enter(BuildState.META_TRAINING)
            logger.info("Training meta classifier %s on %d instances", meta.name, len(dataset))
            meta.train(dataset)

            self._enter(BuildState.RESAMPLING)
            logger.info(
                "Generating %d synthetic instances (%g%%, seed=%d)",
                n,
                config.resample_percent,
                config.seed,
            )
            synthetic = resample_relabel(
                meta, dataset, n, SeededSampler(config.seed), batch_size=self.batch_size
            )
            if config.debug:
                logger.info(
                    "Synthetic label distribution: %s",
                    dict(sorted(Counter(i.label for i in synthetic).items())),
                )

            self._enter(BuildState.SURROGATE_TRAINING)
            logger.info("Training surrogate classifier %s", surrogate.name)
            surrogate.train(synthetic)
        except Exception:
            self._enter(BuildState.FAILED)
            logger.error("Build failed", exc_info=True)
            raise

        model = CombinedModel(
            surrogate=surrogate,
            attributes=dataset.attributes,
            class_attribute=dataset.class_attribute,
            resample_fraction=config.resample_fraction,
            seed=config.seed,
            n_source=len(dataset),
            n_synthetic=len(synthetic),
            meta_name=meta.name,
        )
        self.model = model
        self._enter(BuildState.READY)
        return model

    def predict(self, model: CombinedModel | None, instance: Instance) -> float:
        """Predict with *model*, or with the last built model when it is None.

        Raises:
            NotTrained: If no model is given and the last build did not
                reach ``READY``.
        """
        if model is None:
            if self.state is not BuildState.READY or self.model is None:
                raise NotTrained(f"No combined model available (state: {self.state.value})")
            model = self.model
        return model.predict(instance)


def build_combined_model(dataset: Dataset, config: DistillationConfig) -> CombinedModel:
    """Run a single build with a throwaway orchestrator."""
    return DistillationOrchestrator().build(dataset, config)
