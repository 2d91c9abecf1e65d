from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Callable

import pytest

from combine_models.data.schemas import Attribute, Dataset, Instance
from combine_models.errors import NotTrained, PredictionError, TrainingError
from combine_models.models.base import Classifier


class ConstantClassifier(Classifier):
    """Always predicts the same label."""

    def __init__(self, label: float) -> None:
        self.label = label
        self.trained_on: Dataset | None = None

    def train(self, dataset: Dataset) -> None:
        self.trained_on = dataset.deep_copy()

    def predict(self, instance: Instance) -> float:
        return self.label


class MajorityMemorizer(Classifier):
    """Predicts the most common training label (smallest label on ties)."""

    def __init__(self) -> None:
        self.majority: float | None = None
        self.trained_on: Dataset | None = None

    def train(self, dataset: Dataset) -> None:
        if len(dataset) == 0:
            raise TrainingError("empty dataset")
        counts = Counter(i.label for i in dataset)
        self.majority = min(counts, key=lambda label: (-counts[label], label))
        self.trained_on = dataset.deep_copy()

    def predict(self, instance: Instance) -> float:
        if self.majority is None:
            raise NotTrained("memorizer not trained")
        return self.majority


class ThresholdOracle(Classifier):
    """Label 1 when the first feature exceeds a threshold, else 0."""

    def __init__(self, threshold: float = 4.5) -> None:
        self.threshold = threshold
        self.seen_labels: list[float] = []

    def train(self, dataset: Dataset) -> None:
        self.seen_labels = [i.label for i in dataset]

    def predict(self, instance: Instance) -> float:
        return 1.0 if instance.features[0] > self.threshold else 0.0


class FailingClassifier(Classifier):
    """Fails deterministically in ``train`` or in ``predict``."""

    def __init__(self, stage: str = "train") -> None:
        self.stage = stage

    def train(self, dataset: Dataset) -> None:
        if self.stage == "train":
            raise TrainingError("induced training failure")

    def predict(self, instance: Instance) -> float:
        raise PredictionError("induced prediction failure")


@pytest.fixture(scope="session")
def project_root() -> Path:
    return Path(__file__).resolve().parents[1]


@pytest.fixture
def tmp_outdir(tmp_path: Path) -> Path:
    """Temporary output directory for test artifacts."""
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def make_dataset() -> Callable[[int], Dataset]:
    """Factory for small two-class datasets: x0 = i, x1 = i % 3, label = i % 2."""

    def _make(n: int) -> Dataset:
        attributes = (Attribute("x0"), Attribute("x1"))
        class_attribute = Attribute("class", kind="nominal", values=("A", "B"))
        instances = [Instance((float(i), float(i % 3)), float(i % 2)) for i in range(n)]
        return Dataset(attributes, class_attribute, instances)

    return _make


@pytest.fixture
def dataset(make_dataset) -> Dataset:
    return make_dataset(10)


@pytest.fixture
def doubles():
    """Namespace of test-double classifier classes."""

    class _Doubles:
        Constant = ConstantClassifier
        Majority = MajorityMemorizer
        Threshold = ThresholdOracle
        Failing = FailingClassifier

    return _Doubles
