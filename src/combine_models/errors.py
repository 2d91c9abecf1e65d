"""Exception hierarchy shared by the data model, classifiers and orchestrator."""

from __future__ import annotations


class CombineModelsError(Exception):
    """Base class for every error raised by combine_models."""


class InvalidConfiguration(CombineModelsError, ValueError):
    """Configuration values are missing, out of range or inconsistent."""


class InvalidArgument(CombineModelsError, ValueError):
    """An operation received an argument outside its domain."""


class SchemaMismatch(InvalidArgument):
    """An instance does not fit the attribute schema of a dataset."""


class TrainingError(CombineModelsError):
    """A classifier could not be trained."""


class PredictionError(CombineModelsError):
    """A classifier could not produce a prediction."""


class NotTrained(PredictionError):
    """Prediction was requested from a model that was never trained."""
