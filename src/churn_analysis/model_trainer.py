import os
import warnings
from dataclasses import dataclass, field
from typing import Any, Sequence, Union

import joblib
import numpy as np
import pandas as pd
from sklearn.model_selection import GridSearchCV, RepeatedStratifiedKFold
from sklearn.pipeline import Pipeline

from .errors import ModelFailure, TrainingFailure
from .hyper_tuner import HyperTuner
from .model_registry import ModelKind, ModelSpec
from .preprocessor import Preprocessor
from .utils.logger import get_logger


@dataclass(frozen=True)
class FittedModel:
    """A model pipeline refit on the full training subset with its selected hyperparameters."""
    name: str
    kind: ModelKind
    pipeline: Pipeline
    best_params: dict[str, Any] = field(default_factory=dict)
    cv_auc: float = float("nan")
    cv_auc_std: float = float("nan")
    n_cv_fits: int = 0

    def predict_proba(self, X_df: pd.DataFrame) -> np.ndarray:
        """Positive-class (churn) probability for each row of X_df."""
        return self.pipeline.predict_proba(X_df)[:, 1]

    def save(self, path: str) -> str:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        joblib.dump(self.pipeline, path)
        return path


class ModelTrainer:
    """
    Trains registered model specs with leakage-safe repeated stratified
    k-fold cross-validation: preprocessing lives inside the pipeline, so it
    is fit only on training folds and then applied to the held-out fold.

    Provides:
      - fit: select hyperparameters by mean CV ROC-AUC, refit on all of train
      - fit_all: fit every spec, collecting failures instead of raising
    """

    def __init__(
        self,
        n_splits: int = 10,
        n_repeats: int = 3,
        random_state: int = 42,
        max_iter: int = 1000,
        n_trials: int = 20,
        n_jobs: int = 1,
        impute_strategy: str = "median",
    ):
        self.n_splits = n_splits
        self.n_repeats = n_repeats
        self.random_state = random_state
        self.max_iter = max_iter
        self.n_trials = n_trials
        self.n_jobs = n_jobs
        self.impute_strategy = impute_strategy
        self.logger = get_logger(self.__class__.__name__)

    def _cv(self) -> RepeatedStratifiedKFold:
        return RepeatedStratifiedKFold(
            n_splits=self.n_splits, n_repeats=self.n_repeats, random_state=self.random_state
        )

    def _check_folds(self, spec: ModelSpec, y: np.ndarray) -> None:
        """Every fold must see both classes, so each class needs at least n_splits members."""
        classes, counts = np.unique(y, return_counts=True)
        if len(classes) < 2:
            raise TrainingFailure(spec.name, f"training labels hold a single class {classes.tolist()}")
        if counts.min() < self.n_splits:
            raise TrainingFailure(
                spec.name,
                f"class {classes[counts.argmin()]} has {counts.min()} records, "
                f"fewer than {self.n_splits} folds (degenerate fold)",
            )

    def _check_convergence(self, spec: ModelSpec, pipeline: Pipeline) -> None:
        model = pipeline.named_steps["model"]
        max_iter = model.get_params().get("max_iter")
        n_iter = getattr(model, "n_iter_", None)
        if max_iter is not None and n_iter is not None and np.max(n_iter) >= max_iter:
            raise TrainingFailure(spec.name, f"did not converge within max_iter={max_iter}")

    def build_pipeline(self, spec: ModelSpec, X_df: pd.DataFrame) -> Pipeline:
        prep = Preprocessor(
            impute_strategy=self.impute_strategy,
            use_scaler=spec.scale_numeric,
            dense=spec.dense,
        )
        return Pipeline(
            steps=[
                ("preprocess", prep.build(X_df)),
                ("model", spec.build(self.random_state, self.max_iter)),
            ]
        )

    def _grid_search(self, spec: ModelSpec, pipeline: Pipeline, X_df: pd.DataFrame, y: np.ndarray) -> FittedModel:
        search = GridSearchCV(
            pipeline,
            param_grid={f"model__{k}": list(v) for k, v in spec.param_grid.items()},
            scoring="roc_auc",
            cv=self._cv(),
            n_jobs=self.n_jobs,
            refit=True,
            error_score="raise",
        )
        search.fit(X_df, y)

        best = search.best_index_
        n_candidates = len(search.cv_results_["params"])
        return FittedModel(
            name=spec.name,
            kind=spec.kind,
            pipeline=search.best_estimator_,
            best_params={k.split("__", 1)[1]: v for k, v in search.best_params_.items()},
            cv_auc=float(search.cv_results_["mean_test_score"][best]),
            cv_auc_std=float(search.cv_results_["std_test_score"][best]),
            n_cv_fits=n_candidates * self.n_splits * self.n_repeats,
        )

    def _optuna_search(self, spec: ModelSpec, pipeline: Pipeline, X_df: pd.DataFrame, y: np.ndarray) -> FittedModel:
        tuner = HyperTuner(
            n_trials=self.n_trials,
            n_splits=self.n_splits,
            n_repeats=self.n_repeats,
            random_state=self.random_state,
            n_jobs=self.n_jobs,
        )
        best_params = tuner.tune(pipeline, spec, X_df, y)

        pipeline.set_params(**{f"model__{k}": v for k, v in best_params.items()})
        pipeline.fit(X_df, y)

        return FittedModel(
            name=spec.name,
            kind=spec.kind,
            pipeline=pipeline,
            best_params=best_params,
            cv_auc=tuner.best_value_,
            cv_auc_std=tuner.best_std_,
            n_cv_fits=self.n_trials * self.n_splits * self.n_repeats,
        )

    def fit(self, spec: ModelSpec, X_df: pd.DataFrame, y: np.ndarray) -> FittedModel:
        """
        Select hyperparameters for one spec and refit it on all of X_df.
        Raises TrainingFailure for degenerate folds, non-convergence or any
        estimator error.
        """
        warnings.filterwarnings("ignore", category=UserWarning, module="lightgbm")

        y = np.asarray(y).astype(int)
        self._check_folds(spec, y)

        self.logger.info(
            f"Training {spec.name} ({spec.search} search, "
            f"{self.n_repeats}x{self.n_splits}-fold CV)"
        )
        try:
            pipeline = self.build_pipeline(spec, X_df)
            if spec.search == "optuna":
                fitted = self._optuna_search(spec, pipeline, X_df, y)
            else:
                fitted = self._grid_search(spec, pipeline, X_df, y)
        except Exception as err:
            raise TrainingFailure(spec.name, f"{type(err).__name__}: {err}", cause=err) from err

        self._check_convergence(spec, fitted.pipeline)

        self.logger.info(
            f"{spec.name}: CV ROC-AUC {fitted.cv_auc:.4f} (+/- {fitted.cv_auc_std:.4f}), "
            f"params={fitted.best_params}"
        )
        return fitted

    def _try_fit(
        self, spec: ModelSpec, X_df: pd.DataFrame, y: np.ndarray
    ) -> Union[FittedModel, ModelFailure]:
        try:
            return self.fit(spec, X_df, y)
        except TrainingFailure as err:
            self.logger.warning(f"Training failed for {err.model_name}: {err.reason}")
            return ModelFailure.from_error(err, stage="training")

    def fit_all(
        self, specs: Sequence[ModelSpec], X_df: pd.DataFrame, y: np.ndarray
    ) -> tuple[list[FittedModel], list[ModelFailure]]:
        """Fit each spec independently; one failure never stops the others."""
        outcomes = [self._try_fit(spec, X_df, y) for spec in specs]
        fitted = [o for o in outcomes if isinstance(o, FittedModel)]
        failures = [o for o in outcomes if isinstance(o, ModelFailure)]
        return fitted, failures
