"""Data model: attributes, instances and datasets."""

from combine_models.data.schemas import MISSING, Attribute, Dataset, Instance

__all__ = ["MISSING", "Attribute", "Dataset", "Instance"]
