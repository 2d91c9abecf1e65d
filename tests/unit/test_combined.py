from __future__ import annotations

import pickle

import pandas as pd
import pytest

from combine_models.data.schemas import Dataset
from combine_models.distill.combined import CombinedModel
from combine_models.distill.config import DistillationSettings
from combine_models.distill.orchestrator import build_combined_model
from combine_models.errors import InvalidArgument


@pytest.fixture
def weather(project_root) -> pd.DataFrame:
    return pd.read_csv(project_root / "tests" / "data" / "tiny_weather.csv")


@pytest.fixture
def weather_model(weather) -> CombinedModel:
    dataset = Dataset.from_frame(weather, "play")
    return build_combined_model(dataset, DistillationSettings(resample_percent=200).to_config())


def test_model_metadata(weather_model) -> None:
    assert weather_model.n_source == 14
    assert weather_model.n_synthetic == 28
    assert weather_model.meta_name == "bagging"
    assert weather_model.surrogate_name == "decision_tree"


def test_predict_frame_decodes_classes(weather, weather_model) -> None:
    predictions = weather_model.predict_frame(weather.drop(columns=["play"]))
    assert len(predictions) == 14
    assert set(predictions) <= {"yes", "no"}
    assert predictions.name == "play"


def test_describe(weather_model) -> None:
    text = weather_model.describe()
    assert text.startswith("Combined model built with a generated training set of 200%")
    assert "Base classifier: decision_tree" in text
    assert "Meta classifier: bagging" in text


def test_save_and_load(weather, weather_model, tmp_outdir) -> None:
    path = weather_model.save(tmp_outdir / "model.pkl")
    loaded = CombinedModel.load(path)
    frame = weather.drop(columns=["play"])
    assert loaded.predict_frame(frame).tolist() == weather_model.predict_frame(frame).tolist()


def test_load_rejects_foreign_pickle(tmp_outdir) -> None:
    path = tmp_outdir / "other.pkl"
    with open(path, "wb") as f:
        pickle.dump({"model": "nope"}, f)
    with pytest.raises(InvalidArgument):
        CombinedModel.load(path)


def test_load_missing_file(tmp_outdir) -> None:
    with pytest.raises(InvalidArgument):
        CombinedModel.load(tmp_outdir / "absent.pkl")


def test_model_is_frozen(weather_model) -> None:
    with pytest.raises(AttributeError):
        weather_model.seed = 2
