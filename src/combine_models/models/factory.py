"""ClassifierFactory: build classifiers from a name and options via a registry.

Usage
-----
::

    from combine_models.models.factory import ClassifierFactory

    meta = ClassifierFactory.create("bagging", {"n_estimators": 25}, seed=1)
    surrogate = ClassifierFactory.create("decision_tree", {"max_depth": 5}, seed=1)

Names not in the registry that contain a dot are imported as estimator
classes, e.g. ``"sklearn.svm.SVC"``.

Adding a new classifier
-----------------------
Implement a builder with signature::

    def _build_my_model(**options) -> BaseEstimator | Classifier: ...

Then register it::

    ClassifierFactory.register("my_model", _build_my_model)

Builders returning a scikit-learn estimator are wrapped in
``SklearnClassifier``; builders returning a ``Classifier`` are used as is.
"""

from __future__ import annotations

import importlib
import inspect
from typing import Any, Callable

from sklearn.ensemble import (
    BaggingClassifier,
    BaggingRegressor,
    ExtraTreesClassifier,
    RandomForestClassifier,
)
from sklearn.linear_model import LogisticRegression
from sklearn.naive_bayes import GaussianNB
from sklearn.neighbors import KNeighborsClassifier
from sklearn.tree import DecisionTreeClassifier, DecisionTreeRegressor

from combine_models.errors import InvalidConfiguration
from combine_models.models.base import Classifier
from combine_models.models.sklearn_adapter import SklearnClassifier

# ---------------------------------------------------------------------------
# Internal registry
# ---------------------------------------------------------------------------

# Maps classifier name -> builder(**options) -> estimator or Classifier
_REGISTRY: dict[str, Callable[..., Any]] = {}

DEFAULT_META = "bagging"
DEFAULT_SURROGATE = "decision_tree"
_RANDOM_STATE_MOD = 2**32


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class ClassifierFactory:
    """Registry-based factory for meta and surrogate classifiers.

    A name is resolved (in priority order):

    1. Registered names (``bagging``, ``decision_tree``, ...).
    2. Dotted import paths to an estimator class.
    """

    @staticmethod
    def create(
        name: str,
        options: dict[str, Any] | None = None,
        seed: int | None = None,
    ) -> Classifier:
        """Create an untrained classifier.

        Args:
            name: Registered name or dotted import path.
            options: Keyword arguments for the estimator constructor.
            seed: Used as ``random_state`` (folded into ``[0, 2**32)``) when
                the estimator accepts one and *options* does not set it, so
                builds stay reproducible.

        Returns:
            An untrained ``Classifier``.

        Raises:
            InvalidConfiguration: If the name cannot be resolved or the
                options are rejected by the estimator.
        """
        if not name or not name.strip():
            raise InvalidConfiguration("Classifier name must be a non-empty string")
        options = dict(options or {})
        builder = _REGISTRY.get(name) or _resolve_import_path(name)

        if seed is not None and "random_state" not in options and _accepts(builder, "random_state"):
            # sklearn only accepts random_state in [0, 2**32 - 1]
            options["random_state"] = seed % _RANDOM_STATE_MOD

        try:
            built = builder(**options)
        except TypeError as exc:
            raise InvalidConfiguration(f"Invalid options for '{name}': {exc}") from exc

        if isinstance(built, Classifier):
            return built
        try:
            return SklearnClassifier(built, name=name)
        except TypeError as exc:
            raise InvalidConfiguration(f"'{name}' is not a classifier: {exc}") from exc

    @staticmethod
    def register(name: str, builder: Callable[..., Any]) -> None:
        """Register *builder* under *name* at runtime (for plugins / tests)."""
        _REGISTRY[name] = builder

    @staticmethod
    def registered() -> list[str]:
        """Return sorted list of registered classifier names."""
        return sorted(_REGISTRY.keys())


def _resolve_import_path(name: str) -> Callable[..., Any]:
    if "." not in name:
        raise InvalidConfiguration(
            f"Unknown classifier '{name}'. Registered classifiers: {ClassifierFactory.registered()}"
        )
    module_name, _, attr = name.rpartition(".")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as exc:
        raise InvalidConfiguration(f"Cannot import classifier '{name}': {exc}") from exc


def _accepts(builder: Callable[..., Any], param: str) -> bool:
    try:
        params = inspect.signature(builder).parameters
    except (TypeError, ValueError):
        return False
    return param in params or any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values())


# ---------------------------------------------------------------------------
# Built-in builders
# ---------------------------------------------------------------------------


def _build_bagging(
    n_estimators: int = 10,
    max_samples: float = 1.0,
    random_state: int | None = None,
    **kwargs: Any,
) -> BaggingClassifier:
    """Bootstrap-aggregated decision trees."""
    return BaggingClassifier(
        estimator=DecisionTreeClassifier(),
        n_estimators=n_estimators,
        max_samples=max_samples,
        random_state=random_state,
        **kwargs,
    )


def _build_bagging_regressor(
    n_estimators: int = 10,
    random_state: int | None = None,
    **kwargs: Any,
) -> BaggingRegressor:
    return BaggingRegressor(
        estimator=DecisionTreeRegressor(),
        n_estimators=n_estimators,
        random_state=random_state,
        **kwargs,
    )


# Register built-in classifiers
_REGISTRY[DEFAULT_META] = _build_bagging
_REGISTRY["bagging_regressor"] = _build_bagging_regressor
_REGISTRY["random_forest"] = RandomForestClassifier
_REGISTRY["extra_trees"] = ExtraTreesClassifier
_REGISTRY[DEFAULT_SURROGATE] = DecisionTreeClassifier
_REGISTRY["decision_tree_regressor"] = DecisionTreeRegressor
_REGISTRY["logistic_regression"] = LogisticRegression
_REGISTRY["naive_bayes"] = GaussianNB
_REGISTRY["knn"] = KNeighborsClassifier
