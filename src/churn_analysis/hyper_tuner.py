from typing import Any

import numpy as np
import optuna
import pandas as pd
from sklearn.base import clone
from sklearn.model_selection import RepeatedStratifiedKFold, cross_val_score
from sklearn.pipeline import Pipeline

from .model_registry import ModelSpec
from .utils.logger import get_logger


class HyperTuner:
    """Optuna tuning of a model pipeline, scored by repeated stratified k-fold ROC-AUC."""

    def __init__(
        self,
        n_trials: int = 20,
        n_splits: int = 10,
        n_repeats: int = 3,
        random_state: int = 42,
        n_jobs: int = 1,
    ):
        self.n_trials = n_trials
        self.n_splits = n_splits
        self.n_repeats = n_repeats
        self.random_state = random_state
        self.n_jobs = n_jobs
        self.logger = get_logger(self.__class__.__name__)
        self.best_params_: dict[str, Any] | None = None
        self.best_value_: float | None = None
        self.best_std_: float | None = None

    def tune(
        self,
        pipeline: Pipeline,
        spec: ModelSpec,
        X_df: pd.DataFrame,
        y: np.ndarray,
    ) -> dict[str, Any]:
        """
        Run Optuna optimization and return the best estimator parameters
        (unprefixed). Each trial clones the pipeline, so preprocessing is
        refit inside every training fold.
        """
        self.logger.info(
            f"Starting Optuna tuning for {spec.name} ({self.n_trials} trials, "
            f"{self.n_repeats}x{self.n_splits}-fold CV)"
        )

        # reduce log noise during tuning
        optuna.logging.set_verbosity(optuna.logging.WARNING)

        sampler = optuna.samplers.TPESampler(seed=self.random_state)
        study = optuna.create_study(direction="maximize", sampler=sampler)

        y = np.asarray(y).astype(int)
        cv = RepeatedStratifiedKFold(
            n_splits=self.n_splits, n_repeats=self.n_repeats, random_state=self.random_state
        )

        def objective(trial: optuna.Trial) -> float:
            trial_params = spec.suggest(trial)
            candidate = clone(pipeline)
            candidate.set_params(**{f"model__{k}": v for k, v in trial_params.items()})

            scores = cross_val_score(
                candidate,
                X_df,
                y,
                cv=cv,
                scoring="roc_auc",
                n_jobs=self.n_jobs,
                error_score="raise",
            )
            trial.set_user_attr("std", float(np.std(scores)))
            return float(np.mean(scores))

        study.optimize(objective, n_trials=self.n_trials)

        self.best_params_ = dict(study.best_params)
        self.best_value_ = float(study.best_value)
        self.best_std_ = float(study.best_trial.user_attrs.get("std", np.nan))

        self.logger.info(f"Best CV ROC-AUC: {self.best_value_:.4f}")
        self.logger.info(f"Best parameters: {self.best_params_}")

        return dict(self.best_params_)
