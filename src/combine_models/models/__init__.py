"""Classifier contract, scikit-learn adapter and factory."""

from combine_models.models.base import Classifier
from combine_models.models.factory import ClassifierFactory
from combine_models.models.sklearn_adapter import SklearnClassifier

__all__ = ["Classifier", "ClassifierFactory", "SklearnClassifier"]
