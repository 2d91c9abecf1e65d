"""Resample a dataset with replacement and relabel it with a trained oracle."""

from __future__ import annotations

from combine_models.data.schemas import Dataset
from combine_models.distill.sampler import SeededSampler
from combine_models.errors import InvalidConfiguration, PredictionError
from combine_models.models.base import Classifier
from combine_models.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 1024


def resample_relabel(
    meta: Classifier,
    source: Dataset,
    n: int,
    sampler: SeededSampler,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Dataset:
    """Draw *n* copies of source instances and label them with *meta*.

    Indices are drawn uniformly with replacement from ``sampler`` in draw
    order. Each drawn instance is copied before relabeling, so *source* and
    its instances are never modified and duplicates do not alias each other.
    Predictions are made in batches of *batch_size* on the copies, whose
    features are identical to the source; output order is the draw order.

    Args:
        meta: Trained classifier used as the labeling oracle.
        source: Dataset to draw from.
        n: Number of synthetic instances to produce.
        sampler: Fresh sampler for this build.
        batch_size: Instances per ``predict_many`` call.

    Returns:
        New dataset with the schema of *source* and exactly *n* instances.

    Raises:
        InvalidConfiguration: If *n* is negative.
        InvalidArgument: If *n* > 0 and *source* is empty.
        PredictionError: If *meta* fails on any drawn instance. No partial
            dataset is returned.
    """
    if n < 0:
        raise InvalidConfiguration(f"Synthetic dataset size must be non-negative, got {n}")
    if batch_size <= 0:
        raise InvalidConfiguration(f"batch_size must be positive, got {batch_size}")

    synthetic = source.empty_copy()
    if n == 0:
        logger.warning("Synthetic dataset size is 0; returning an empty dataset")
        return synthetic

    indices = sampler.draw(len(source), n)
    drawn = [source[j].copy() for j in indices]

    for start in range(0, n, batch_size):
        batch = drawn[start : start + batch_size]
        labels = meta.predict_many(batch)
        if len(labels) != len(batch):
            raise PredictionError(
                f"{meta.name} returned {len(labels)} predictions for {len(batch)} instances"
            )
        for instance, label in zip(batch, labels):
            instance.label = float(label)
            synthetic.add(instance)

    logger.debug(
        "Relabeled %d instances drawn from %d (%d distinct)",
        n,
        len(source),
        len(set(indices)),
    )
    return synthetic
