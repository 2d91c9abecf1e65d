"""End-to-end tests for the combine-models command line."""

from __future__ import annotations

import json
import pickle

import pandas as pd

from combine_models.cli import main
from combine_models.distill.combined import CombinedModel


def test_build_predict_describe(project_root, tmp_outdir, capsys) -> None:
    data = project_root / "tests" / "data" / "tiny_weather.csv"
    model_path = tmp_outdir / "weather.pkl"

    code = main(
        [
            "build",
            "--config",
            str(project_root / "configs" / "config.yaml"),
            "--data",
            str(data),
            "--class-column",
            "play",
            "--resample-percent",
            "150",
            "--seed",
            "3",
            "--output",
            str(model_path),
        ]
    )
    assert code == 0
    assert "Combined model built" in capsys.readouterr().out

    model = CombinedModel.load(model_path)
    assert model.n_synthetic == 21
    assert model.seed == 3

    metadata = json.loads((tmp_outdir / "weather.pkl.run.json").read_text(encoding="utf-8"))
    assert metadata["stage"] == "build"
    assert metadata["seed"] == 3
    assert metadata["metrics"] == {"n_source": 14, "n_synthetic": 21}

    predictions_path = tmp_outdir / "predictions.csv"
    assert main(["predict", "--model", str(model_path), "--data", str(data), "--output", str(predictions_path)]) == 0
    predictions = pd.read_csv(predictions_path)
    assert list(predictions.columns) == ["play"]
    assert len(predictions) == 14

    assert main(["describe", "--model", str(model_path)]) == 0
    assert "Meta classifier: bagging" in capsys.readouterr().out


def test_build_reports_configuration_errors(project_root, tmp_outdir) -> None:
    code = main(
        [
            "build",
            "--data",
            str(project_root / "tests" / "data" / "tiny_weather.csv"),
            "--class-column",
            "play",
            "--surrogate",
            "no_such_model",
            "--output",
            str(tmp_outdir / "model.pkl"),
        ]
    )
    assert code == 2
    assert not (tmp_outdir / "model.pkl").exists()


def test_build_requires_class_column(project_root, tmp_outdir) -> None:
    code = main(
        [
            "build",
            "--data",
            str(project_root / "tests" / "data" / "tiny_weather.csv"),
            "--output",
            str(tmp_outdir / "model.pkl"),
        ]
    )
    assert code == 2


def test_build_rejects_unknown_table_format(tmp_outdir) -> None:
    data = tmp_outdir / "d.txt"
    data.write_text("x,play\n1,yes\n", encoding="utf-8")
    code = main(
        ["build", "--data", str(data), "--class-column", "play", "--output", str(tmp_outdir / "m.pkl")]
    )
    assert code == 2


def test_build_reports_missing_data_file(tmp_outdir) -> None:
    code = main(
        [
            "build",
            "--data",
            str(tmp_outdir / "absent.csv"),
            "--class-column",
            "play",
            "--output",
            str(tmp_outdir / "m.pkl"),
        ]
    )
    assert code == 2


def test_predict_rejects_foreign_model_file(project_root, tmp_outdir) -> None:
    model_path = tmp_outdir / "not_a_model.pkl"
    with open(model_path, "wb") as f:
        pickle.dump({"weights": [1, 2, 3]}, f)
    data = project_root / "tests" / "data" / "tiny_weather.csv"
    assert main(["predict", "--model", str(model_path), "--data", str(data)]) == 2
    assert main(["describe", "--model", str(tmp_outdir / "absent.pkl")]) == 2
