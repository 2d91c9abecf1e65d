from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd
import yaml

from combine_models.errors import InvalidArgument


def load_yaml(path: str | Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def save_json(obj: Any, path: str | Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)


def load_table(path: str | Path) -> pd.DataFrame:
    """Load a tabular dataset from CSV or Parquet, chosen by extension."""
    path = Path(path)
    if not path.is_file():
        raise InvalidArgument(f"No such data file: {path}")
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path)
    if suffix in (".parquet", ".pq"):
        return pd.read_parquet(path)
    raise InvalidArgument(f"Cannot auto-detect format for {path.suffix}")


def save_table(df: pd.DataFrame, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in (".parquet", ".pq"):
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)
