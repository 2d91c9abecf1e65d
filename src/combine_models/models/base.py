"""Abstract base class for classifiers used as meta or surrogate models."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Sequence

from combine_models.data.schemas import Dataset, Instance


class Classifier(ABC):
    """Contract shared by the meta-classifier and the surrogate classifier.

    Both roles are peers: the orchestrator composes two instances of this
    interface, one used as a labeling oracle and one that is finally deployed.
    Only two methods are required:

    - ``train()`` fits internal state on a dataset, raising ``TrainingError``
      on failure.
    - ``predict()`` returns the label for one instance, raising
      ``PredictionError`` on failure (``NotTrained`` when called before
      ``train()``).

    Labels are floats: a class index for nominal class attributes or the
    target value for regression.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def train(self, dataset: Dataset) -> None:
        """Fit the classifier on *dataset*.

        Args:
            dataset: Training data. Must not be mutated.

        Raises:
            TrainingError: If fitting fails (empty data, bad schema, ...).
        """

    @abstractmethod
    def predict(self, instance: Instance) -> float:
        """Predict the label of a single *instance*.

        Raises:
            PredictionError: If no prediction can be made.
            NotTrained: If the classifier was never trained.
        """

    def predict_many(self, instances: Sequence[Instance]) -> list[float]:
        """Predict labels for *instances*, preserving their order.

        Subclasses backed by vectorised libraries override this.
        """
        return [self.predict(instance) for instance in instances]

    def fresh(self) -> "Classifier":
        """Return an independent copy that can be trained without touching *self*."""
        return copy.deepcopy(self)

    def describe(self) -> str:
        return repr(self)
