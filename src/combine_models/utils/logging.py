from __future__ import annotations

import hashlib
import json
import logging
import platform
import socket
from datetime import datetime
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
import sklearn

from combine_models.utils.io import save_json


def get_logger(name: str = "combine_models") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    return logger


def set_debug(enabled: bool) -> None:
    """Switch every ``combine_models`` logger between INFO and DEBUG."""
    level = logging.DEBUG if enabled else logging.INFO
    get_logger("combine_models").setLevel(level)
    for name, obj in logging.Logger.manager.loggerDict.items():
        if name.startswith("combine_models.") and isinstance(obj, logging.Logger):
            obj.setLevel(level)


def get_env_fingerprint() -> dict[str, Any]:
    """Capture environment fingerprint (Python and library versions)."""
    return {
        "python_version": platform.python_version(),
        "hostname": socket.gethostname(),
        "platform": platform.platform(),
        "numpy_version": np.__version__,
        "pandas_version": pd.__version__,
        "sklearn_version": sklearn.__version__,
    }


def hash_config(config: dict[str, Any]) -> str:
    """Stable SHA256 of a JSON-serializable config mapping."""
    payload = json.dumps(config, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def start_run_metadata(
    stage: str,
    config: dict[str, Any],
    seed: int,
    data_fingerprint: str | None = None,
) -> dict[str, Any]:
    """Initialize run metadata at start of a stage.

    Args:
        stage: Stage name (build, predict)
        config: Effective settings used for the run
        seed: Resampling seed
        data_fingerprint: Hash/fingerprint of the input dataset

    Returns:
        Metadata dict (to be finalized with finalize_run_metadata)
    """
    run_id = f"{stage}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    return {
        "run_id": run_id,
        "stage": stage,
        "started_at": datetime.now().isoformat(),
        "config": config,
        "config_hash": hash_config(config),
        "data_fingerprint": data_fingerprint,
        "seed": seed,
        "env": get_env_fingerprint(),
    }


def finalize_run_metadata(
    metadata: dict[str, Any],
    outputs: list[str | Path] | None = None,
    metrics: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Finalize run metadata with completion time and outputs.

    Args:
        metadata: Metadata dict from start_run_metadata
        outputs: List of output file paths created
        metrics: Optional counters to include (dataset sizes, ...)

    Returns:
        Finalized metadata dict
    """
    metadata["finished_at"] = datetime.now().isoformat()
    if outputs:
        metadata["outputs"] = [str(p) for p in outputs]
    if metrics:
        metadata["metrics"] = metrics

    return metadata


def save_run_metadata(metadata: dict[str, Any], output_path: str | Path) -> None:
    """Save run metadata to JSON file."""
    save_json(metadata, output_path)
