"""Instances, datasets and the attribute schema they share."""

from __future__ import annotations

import hashlib
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Literal, Sequence

import numpy as np
import pandas as pd

from combine_models.errors import SchemaMismatch

MISSING = float("nan")


@dataclass(frozen=True)
class Attribute:
    """A single column definition: numeric, or nominal with a fixed value list."""

    name: str
    kind: Literal["numeric", "nominal"] = "numeric"
    values: tuple[str, ...] = ()

    @property
    def is_nominal(self) -> bool:
        return self.kind == "nominal"

    def encode(self, value: Any) -> float:
        """Map a raw value to its internal float (index for nominal values)."""
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return MISSING
        if not self.is_nominal:
            return float(value)
        try:
            return float(self.values.index(str(value)))
        except ValueError:
            return MISSING

    def decode(self, value: float) -> Any:
        if math.isnan(value):
            return None
        if not self.is_nominal:
            return value
        return self.values[int(value)]

    def accepts(self, value: float) -> bool:
        if math.isnan(value):
            return True
        if not self.is_nominal:
            return math.isfinite(value)
        return float(value).is_integer() and 0 <= value < len(self.values)


@dataclass
class Instance:
    """Ordered feature vector plus a mutable label.

    Features are kept as an immutable tuple of floats; only ``label`` may change.
    Missing values are NaN.
    """

    features: tuple[float, ...]
    label: float = MISSING

    def __post_init__(self) -> None:
        self.features = tuple(float(v) for v in self.features)
        self.label = float(self.label)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instance):
            return NotImplemented
        return _same_values(self.features, other.features) and _same_values(
            (self.label,), (other.label,)
        )

    @property
    def num_features(self) -> int:
        return len(self.features)

    def copy(self) -> "Instance":
        return Instance(self.features, self.label)


def _same_values(a: Sequence[float], b: Sequence[float]) -> bool:
    # NaN compares equal to NaN so missing values survive value comparison
    if len(a) != len(b):
        return False
    return all(x == y or (math.isnan(x) and math.isnan(y)) for x, y in zip(a, b))


@dataclass
class Dataset:
    """Ordered collection of instances sharing one attribute schema.

    Every instance added must be compatible with ``attributes`` (same feature
    count, values allowed by each attribute) and its label with ``class_attribute``.
    """

    attributes: tuple[Attribute, ...]
    class_attribute: Attribute
    instances: list[Instance] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.attributes = tuple(self.attributes)
        initial, self.instances = list(self.instances), []
        self.extend(initial)

    def __len__(self) -> int:
        return len(self.instances)

    def __getitem__(self, index: int) -> Instance:
        return self.instances[index]

    def __iter__(self) -> Iterator[Instance]:
        return iter(self.instances)

    @property
    def size(self) -> int:
        return len(self.instances)

    @property
    def num_attributes(self) -> int:
        return len(self.attributes)

    @property
    def is_regression(self) -> bool:
        return not self.class_attribute.is_nominal

    def schema_matches(self, other: "Dataset") -> bool:
        return (
            self.attributes == other.attributes
            and self.class_attribute == other.class_attribute
        )

    def is_compatible(self, instance: Instance) -> bool:
        if instance.num_features != self.num_attributes:
            return False
        if not all(a.accepts(v) for a, v in zip(self.attributes, instance.features)):
            return False
        return self.class_attribute.accepts(instance.label)

    def add(self, instance: Instance) -> None:
        if not self.is_compatible(instance):
            raise SchemaMismatch(
                f"Instance with {instance.num_features} features does not match "
                f"schema with {self.num_attributes} attributes "
                f"(class '{self.class_attribute.name}')"
            )
        self.instances.append(instance)

    def extend(self, instances: Iterable[Instance]) -> None:
        for instance in instances:
            self.add(instance)

    def empty_copy(self) -> "Dataset":
        """New dataset with the same schema and no instances."""
        return Dataset(self.attributes, self.class_attribute)

    def deep_copy(self) -> "Dataset":
        return Dataset(self.attributes, self.class_attribute, [i.copy() for i in self.instances])

    def feature_matrix(self) -> np.ndarray:
        if not self.instances:
            return np.empty((0, self.num_attributes), dtype=np.float64)
        return np.asarray([i.features for i in self.instances], dtype=np.float64)

    def labels(self) -> np.ndarray:
        return np.asarray([i.label for i in self.instances], dtype=np.float64)

    def fingerprint(self) -> str:
        """SHA256 over the schema, feature values and labels, in order."""
        h = hashlib.sha256()
        h.update(repr((self.attributes, self.class_attribute)).encode("utf-8"))
        h.update(np.ascontiguousarray(self.feature_matrix()).tobytes())
        h.update(np.ascontiguousarray(self.labels()).tobytes())
        return h.hexdigest()

    # ------------------------------------------------------------------
    # pandas interop
    # ------------------------------------------------------------------

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        class_column: str,
        nominal_class: bool | None = None,
    ) -> "Dataset":
        """Build a dataset from a DataFrame.

        Numeric columns become numeric attributes; any other column becomes a
        nominal attribute whose values are the sorted distinct strings. The class
        column is nominal when ``nominal_class`` is true, or when it is left as
        None and the column is not of float dtype.
        """
        if class_column not in df.columns:
            raise SchemaMismatch(f"Class column '{class_column}' not in {list(df.columns)}")

        attributes = tuple(
            _infer_attribute(df[col], nominal=None) for col in df.columns if col != class_column
        )
        target = df[class_column]
        if nominal_class is None:
            nominal_class = not pd.api.types.is_float_dtype(target)
        class_attribute = _infer_attribute(target, nominal=nominal_class)

        dataset = cls(attributes, class_attribute)
        return dataset.encode_frame(df, class_column)

    def encode_frame(self, df: pd.DataFrame, class_column: str | None = None) -> "Dataset":
        """Encode a DataFrame against this dataset's schema.

        Feature columns are matched by attribute name. A missing class column
        leaves labels missing; unseen nominal values are treated as missing.
        """
        names = [a.name for a in self.attributes]
        absent = [n for n in names if n not in df.columns]
        if absent:
            raise SchemaMismatch(f"Missing feature columns: {absent}")
        class_column = class_column or self.class_attribute.name

        out = self.empty_copy()
        columns = [df[n].tolist() for n in names]
        targets = df[class_column].tolist() if class_column in df.columns else None
        for row in range(len(df)):
            features = tuple(a.encode(col[row]) for a, col in zip(self.attributes, columns))
            label = self.class_attribute.encode(targets[row]) if targets is not None else MISSING
            out.add(Instance(features, label))
        return out

    def to_frame(self, decode: bool = True) -> pd.DataFrame:
        data: dict[str, list[Any]] = {}
        for j, attr in enumerate(self.attributes):
            values = [i.features[j] for i in self.instances]
            data[attr.name] = [attr.decode(v) for v in values] if decode else values
        labels = [i.label for i in self.instances]
        data[self.class_attribute.name] = (
            [self.class_attribute.decode(v) for v in labels] if decode else labels
        )
        return pd.DataFrame(data)


def _infer_attribute(series: pd.Series, nominal: bool | None) -> Attribute:
    if nominal is None:
        nominal = not pd.api.types.is_numeric_dtype(series) or pd.api.types.is_bool_dtype(series)
    if not nominal:
        return Attribute(name=str(series.name), kind="numeric")
    values = tuple(sorted({str(v) for v in series.dropna().tolist()}))
    return Attribute(name=str(series.name), kind="nominal", values=values)
