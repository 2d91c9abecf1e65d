"""The trained artifact of a distillation build."""

from __future__ import annotations

import pickle
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from combine_models.data.schemas import Attribute, Dataset, Instance
from combine_models.errors import InvalidArgument
from combine_models.models.base import Classifier
from combine_models.utils.logging import get_logger

logger = get_logger(__name__)

BUNDLE_FORMAT = "combine_models/combined-model"
BUNDLE_VERSION = 1


@dataclass(frozen=True)
class CombinedModel:
    """Fitted surrogate plus a description of how it was built.

    Holds no reference to the meta-classifier: predictions come from the
    surrogate alone.
    """

    surrogate: Classifier
    attributes: tuple[Attribute, ...]
    class_attribute: Attribute
    resample_fraction: float
    seed: int
    n_source: int
    n_synthetic: int
    meta_name: str

    @property
    def surrogate_name(self) -> str:
        return self.surrogate.name

    def predict(self, instance: Instance) -> float:
        return self.surrogate.predict(instance)

    def predict_many(self, instances: Sequence[Instance]) -> list[float]:
        return self.surrogate.predict_many(instances)

    def schema(self) -> Dataset:
        """Empty dataset carrying the schema the model was trained on."""
        return Dataset(self.attributes, self.class_attribute)

    def predict_frame(self, df: pd.DataFrame) -> pd.Series:
        """Predict every row of *df*, returning decoded class values."""
        dataset = self.schema().encode_frame(df)
        labels = self.predict_many(dataset.instances)
        return pd.Series(
            [self.class_attribute.decode(v) for v in labels],
            index=df.index,
            name=self.class_attribute.name,
        )

    def describe(self) -> str:
        text = (
            "Combined model built with a generated training set of "
            f"{self.resample_fraction * 100:g}% of the training data "
            f"({self.n_synthetic} of {self.n_source} instances, seed {self.seed}).\n\n"
            f"Base classifier: {self.surrogate_name}\n"
            f"Meta classifier: {self.meta_name}\n\n"
        )
        return text + self.surrogate.describe()

    def save(self, path: str | Path) -> Path:
        """Pickle the model bundle to *path*."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        bundle: dict[str, Any] = {
            "format": BUNDLE_FORMAT,
            "version": BUNDLE_VERSION,
            "model": self,
        }
        with open(path, "wb") as f:
            pickle.dump(bundle, f)
        logger.info("Saved combined model to %s", path)
        return path

    @classmethod
    def load(cls, path: str | Path) -> "CombinedModel":
        if not Path(path).is_file():
            raise InvalidArgument(f"No such model file: {path}")
        with open(path, "rb") as f:
            bundle = pickle.load(f)
        if not isinstance(bundle, dict) or bundle.get("format") != BUNDLE_FORMAT:
            raise InvalidArgument(f"{path} is not a combined model bundle")
        model = bundle["model"]
        if not isinstance(model, cls):
            raise InvalidArgument(f"{path} holds {type(model).__name__}, expected {cls.__name__}")
        return model
