"""Adapter exposing any scikit-learn estimator through the ``Classifier`` contract."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from sklearn.base import BaseEstimator, clone

from combine_models.data.schemas import Dataset, Instance
from combine_models.errors import NotTrained, PredictionError, TrainingError
from combine_models.models.base import Classifier
from combine_models.utils.logging import get_logger

logger = get_logger(__name__)


class SklearnClassifier(Classifier):
    """Wrap an unfitted scikit-learn estimator.

    ``train`` always fits a ``clone`` of the configured estimator, so the
    template passed in stays unfitted and can be reused.
    """

    def __init__(self, estimator: BaseEstimator, name: str | None = None) -> None:
        if not (hasattr(estimator, "fit") and hasattr(estimator, "predict")):
            raise TypeError(f"{type(estimator).__name__} does not implement fit/predict")
        self.estimator = estimator
        self._name = name or type(estimator).__name__
        self.fitted_: BaseEstimator | None = None
        self.n_features_: int | None = None

    def __repr__(self) -> str:
        return f"SklearnClassifier({self.estimator!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_trained(self) -> bool:
        return self.fitted_ is not None

    def fresh(self) -> "SklearnClassifier":
        return SklearnClassifier(clone(self.estimator), name=self._name)

    def train(self, dataset: Dataset) -> None:
        if len(dataset) == 0:
            raise TrainingError(f"Cannot train {self.name} on an empty dataset")

        X = dataset.feature_matrix()
        y = dataset.labels()
        if np.isnan(y).any():
            raise TrainingError(
                f"Cannot train {self.name}: {int(np.isnan(y).sum())} instances have a missing label"
            )

        model = clone(self.estimator)
        try:
            model.fit(X, y)
        except Exception as exc:
            raise TrainingError(f"{self.name} failed to fit: {exc}") from exc

        self.fitted_ = model
        self.n_features_ = X.shape[1]
        logger.debug("Trained %s on %d instances, %d features", self.name, X.shape[0], X.shape[1])

    def predict(self, instance: Instance) -> float:
        return self.predict_many([instance])[0]

    def predict_many(self, instances: Sequence[Instance]) -> list[float]:
        if self.fitted_ is None:
            raise NotTrained(f"{self.name} has not been trained")
        if not instances:
            return []

        for instance in instances:
            if instance.num_features != self.n_features_:
                raise PredictionError(
                    f"{self.name} expects {self.n_features_} features, "
                    f"got {instance.num_features}"
                )
        X = np.asarray([i.features for i in instances], dtype=np.float64)
        try:
            preds = self.fitted_.predict(X)
        except Exception as exc:
            raise PredictionError(f"{self.name} failed to predict: {exc}") from exc
        return [float(p) for p in preds]

    def describe(self) -> str:
        text = f"{self.name}: {self.estimator!r}"
        fitted: Any = self.fitted_
        if fitted is not None and hasattr(fitted, "get_depth"):
            text += f"\n  depth={fitted.get_depth()}, leaves={fitted.get_n_leaves()}"
        return text
