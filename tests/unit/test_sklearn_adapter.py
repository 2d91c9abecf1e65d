from __future__ import annotations

import pytest
from sklearn.tree import DecisionTreeClassifier

from combine_models.data.schemas import MISSING, Instance
from combine_models.errors import NotTrained, PredictionError, TrainingError
from combine_models.models.sklearn_adapter import SklearnClassifier


def test_train_and_predict(dataset) -> None:
    clf = SklearnClassifier(DecisionTreeClassifier(random_state=0))
    clf.train(dataset)
    assert clf.is_trained
    preds = clf.predict_many(dataset.instances)
    assert preds == dataset.labels().tolist()
    assert clf.predict(dataset[1]) == 1.0


def test_template_estimator_stays_unfitted(dataset) -> None:
    template = DecisionTreeClassifier()
    clf = SklearnClassifier(template)
    clf.train(dataset)
    assert not hasattr(template, "tree_")


def test_fresh_is_untrained(dataset) -> None:
    clf = SklearnClassifier(DecisionTreeClassifier())
    clf.train(dataset)
    assert not clf.fresh().is_trained


def test_predict_before_train(dataset) -> None:
    with pytest.raises(NotTrained):
        SklearnClassifier(DecisionTreeClassifier()).predict(dataset[0])


def test_empty_dataset(make_dataset) -> None:
    with pytest.raises(TrainingError):
        SklearnClassifier(DecisionTreeClassifier()).train(make_dataset(0))


def test_missing_labels(dataset) -> None:
    broken = dataset.deep_copy()
    broken[0].label = MISSING
    with pytest.raises(TrainingError):
        SklearnClassifier(DecisionTreeClassifier()).train(broken)


def test_fit_failure_is_wrapped(dataset) -> None:
    clf = SklearnClassifier(DecisionTreeClassifier(max_depth=-1))
    with pytest.raises(TrainingError) as excinfo:
        clf.train(dataset)
    assert excinfo.value.__cause__ is not None


def test_wrong_feature_count(dataset) -> None:
    clf = SklearnClassifier(DecisionTreeClassifier())
    clf.train(dataset)
    with pytest.raises(PredictionError):
        clf.predict(Instance((1.0, 2.0, 3.0)))


def test_rejects_non_estimator() -> None:
    with pytest.raises(TypeError):
        SklearnClassifier(object())


def test_mixed_feature_counts_in_batch(dataset) -> None:
    clf = SklearnClassifier(DecisionTreeClassifier())
    clf.train(dataset)
    with pytest.raises(PredictionError):
        clf.predict_many([Instance((1.0, 2.0)), Instance((1.0,))])
