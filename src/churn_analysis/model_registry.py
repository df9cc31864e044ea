from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

import optuna
from lightgbm import LGBMClassifier
from sklearn.base import ClassifierMixin
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.naive_bayes import GaussianNB


class ModelKind(Enum):
    GLMNET = "glmnet"
    NAIVE_BAYES = "naive_bayes"
    RANDOM_FOREST = "random_forest"
    GRADIENT_BOOSTING = "gradient_boosting"


@dataclass(frozen=True)
class ModelSpec:
    """
    A named classifier variant: how to build it, how to search its
    hyperparameters and what preprocessing it needs.

    ``build(random_state, max_iter)`` returns an unfitted estimator.
    ``search`` is "grid" (exhaustive over ``param_grid``) or "optuna"
    (TPE sampling with ``suggest``). Parameter names are the estimator's
    own; the trainer prefixes them for the pipeline.
    """
    name: str
    kind: ModelKind
    build: Callable[[int, int], ClassifierMixin]
    search: str = "grid"
    param_grid: Mapping[str, Sequence[Any]] = field(default_factory=dict)
    suggest: Optional[Callable[[optuna.Trial], dict]] = None
    scale_numeric: bool = False
    dense: bool = False

    def __post_init__(self):
        if self.search not in ("grid", "optuna"):
            raise ValueError(f"{self.name}: unknown search policy {self.search!r}")
        if self.search == "optuna" and self.suggest is None:
            raise ValueError(f"{self.name}: optuna search needs a suggest function")


def _build_glmnet(random_state: int, max_iter: int) -> LogisticRegression:
    return LogisticRegression(
        # l1_ratio alone selects the elastic-net penalty
        solver="saga",
        l1_ratio=0.5,
        max_iter=max_iter,
        random_state=random_state,
    )


def _build_naive_bayes(random_state: int, max_iter: int) -> GaussianNB:
    return GaussianNB()


def _build_random_forest(random_state: int, max_iter: int) -> RandomForestClassifier:
    return RandomForestClassifier(
        n_estimators=200,
        random_state=random_state,
        n_jobs=1,
    )


def _build_lightgbm(random_state: int, max_iter: int) -> LGBMClassifier:
    return LGBMClassifier(
        n_estimators=min(300, max_iter),
        random_state=random_state,
        n_jobs=1,
        verbosity=-1,
    )


def _suggest_lightgbm(trial: optuna.Trial) -> dict[str, Any]:
    """Optuna search space for LightGBM."""
    return {
        "n_estimators": trial.suggest_int("n_estimators", 100, 600, step=100),
        "learning_rate": trial.suggest_float("learning_rate", 0.005, 0.1, log=True),
        "num_leaves": trial.suggest_int("num_leaves", 8, 64),
        "min_child_samples": trial.suggest_int("min_child_samples", 10, 100),
        "colsample_bytree": trial.suggest_float("colsample_bytree", 0.6, 1.0),
        "reg_lambda": trial.suggest_float("reg_lambda", 1e-8, 10.0, log=True),
    }


REGISTRY: dict[str, ModelSpec] = {
    spec.name: spec
    for spec in (
        ModelSpec(
            name="glmnet",
            kind=ModelKind.GLMNET,
            build=_build_glmnet,
            param_grid={"C": [0.01, 0.1, 1.0, 10.0], "l1_ratio": [0.0, 0.5, 1.0]},
            scale_numeric=True,
            dense=True,
        ),
        ModelSpec(
            name="naive_bayes",
            kind=ModelKind.NAIVE_BAYES,
            build=_build_naive_bayes,
            param_grid={"var_smoothing": [1e-9, 1e-7, 1e-5, 1e-3]},
            dense=True,
        ),
        ModelSpec(
            name="random_forest",
            kind=ModelKind.RANDOM_FOREST,
            build=_build_random_forest,
            param_grid={"max_features": ["sqrt", 0.5], "min_samples_leaf": [1, 5]},
        ),
        ModelSpec(
            name="lightgbm",
            kind=ModelKind.GRADIENT_BOOSTING,
            build=_build_lightgbm,
            search="optuna",
            suggest=_suggest_lightgbm,
        ),
    )
}


def get_specs(names: Iterable[str]) -> list[ModelSpec]:
    """Look up registered specs by name, keeping the requested order."""
    names = list(names)
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate model names: {duplicates}")

    unknown = [n for n in names if n not in REGISTRY]
    if unknown:
        raise KeyError(f"Unknown models: {unknown}. Registered: {list(REGISTRY)}")

    return [REGISTRY[n] for n in names]
