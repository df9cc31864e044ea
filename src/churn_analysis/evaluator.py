from dataclasses import dataclass, field
from typing import Dict, Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    average_precision_score,
    balanced_accuracy_score,
    f1_score,
    precision_recall_curve,
    precision_score,
    recall_score,
    roc_auc_score,
)

from .errors import EvaluationFailure, ModelFailure
from .model_trainer import FittedModel
from .utils.logger import get_logger


@dataclass(frozen=True)
class EvaluationResult:
    """Test-set ROC-AUC of one fitted model with its bootstrap confidence interval."""
    name: str
    auc: float
    lower: float
    upper: float
    confidence_level: float = 0.95
    n_test: int = 0
    cv_auc: float = float("nan")
    metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def width(self) -> float:
        return self.upper - self.lower


def roc_auc(y_true: np.ndarray, y_proba: np.ndarray) -> float:
    """
    Probability that a random churned record scores above a random
    non-churned one (ties count half). 1.0 is perfect separation,
    0.5 no discrimination. Raises ValueError if y_true has one class.
    """
    y_true = np.asarray(y_true).astype(int)
    if len(np.unique(y_true)) < 2:
        raise ValueError("ROC-AUC is undefined when only one class is present")
    return float(roc_auc_score(y_true, np.asarray(y_proba, dtype=float)))


def bootstrap_auc_ci(
    y_true: np.ndarray,
    y_proba: np.ndarray,
    n_bootstrap: int = 2000,
    confidence_level: float = 0.95,
    seed: int = 42,
) -> tuple[float, float]:
    """Percentile bootstrap interval for ROC-AUC. Resamples holding one class are skipped."""
    rng = np.random.default_rng(seed)
    y_true = np.asarray(y_true).astype(int)
    y_proba = np.asarray(y_proba, dtype=float)

    n = len(y_true)
    aucs: list[float] = []
    for _ in range(n_bootstrap):
        idx = rng.integers(0, n, size=n)
        y_b = y_true[idx]
        if y_b.min() == y_b.max():
            continue
        aucs.append(roc_auc_score(y_b, y_proba[idx]))

    if not aucs:
        return float("nan"), float("nan")

    alpha = (1.0 - confidence_level) / 2.0
    lo, hi = np.percentile(aucs, [100 * alpha, 100 * (1 - alpha)])
    return float(lo), float(hi)


class Evaluator:
    """Evaluate fitted models on the held-out test subset."""

    def __init__(
        self,
        confidence_level: float = 0.95,
        n_bootstrap: int = 2000,
        random_state: int = 42,
        verbose: bool = True,
    ):
        self.confidence_level = confidence_level
        self.n_bootstrap = n_bootstrap
        self.random_state = random_state
        self.verbose = verbose
        self.logger = get_logger(self.__class__.__name__)

    def _find_best_threshold(self, y_true: np.ndarray, y_proba: np.ndarray) -> float:
        """Return threshold that maximizes F1 on the precision-recall curve."""
        precision, recall, thresholds = precision_recall_curve(y_true, y_proba)

        # precision_recall_curve returns thresholds of length (len(precision)-1)
        precision_t = precision[:-1]
        recall_t = recall[:-1]

        f1_scores = 2 * precision_t * recall_t / (precision_t + recall_t + 1e-8)
        best_idx = int(np.nanargmax(f1_scores))
        return float(thresholds[best_idx])

    def threshold_metrics(self, y_true: np.ndarray, y_proba: np.ndarray) -> Dict[str, float]:
        best_threshold = self._find_best_threshold(y_true, y_proba)
        y_pred = (y_proba >= best_threshold).astype(int)

        return {
            "PR_AUC": float(average_precision_score(y_true, y_proba)),
            "Balanced_Accuracy": float(balanced_accuracy_score(y_true, y_pred)),
            "F1": float(f1_score(y_true, y_pred, zero_division=0)),
            "Precision": float(precision_score(y_true, y_pred, zero_division=0)),
            "Recall": float(recall_score(y_true, y_pred, zero_division=0)),
            "Accuracy": float(accuracy_score(y_true, y_pred)),
            "Best_Threshold": float(best_threshold),
        }

    def _probabilities(self, model: FittedModel, X_df: pd.DataFrame, n_expected: int) -> np.ndarray:
        try:
            y_proba = np.asarray(model.predict_proba(X_df), dtype=float)
        except (AttributeError, IndexError, ValueError) as err:
            raise EvaluationFailure(
                model.name, f"no probability output ({type(err).__name__}: {err})", cause=err
            ) from err

        if y_proba.shape != (n_expected,):
            raise EvaluationFailure(
                model.name, f"expected {n_expected} probabilities, got shape {y_proba.shape}"
            )
        n_missing = int((~np.isfinite(y_proba)).sum())
        if n_missing:
            raise EvaluationFailure(model.name, f"{n_missing} test records have no probability")
        return y_proba

    def evaluate(self, model: FittedModel, X_df: pd.DataFrame, y_true: np.ndarray) -> EvaluationResult:
        """Score one fitted model on the test subset."""
        y_true = np.asarray(y_true).astype(int)
        y_proba = self._probabilities(model, X_df, len(y_true))

        try:
            auc = roc_auc(y_true, y_proba)
        except ValueError as err:
            raise EvaluationFailure(model.name, str(err), cause=err) from err

        lower, upper = bootstrap_auc_ci(
            y_true,
            y_proba,
            n_bootstrap=self.n_bootstrap,
            confidence_level=self.confidence_level,
            seed=self.random_state,
        )

        result = EvaluationResult(
            name=model.name,
            auc=auc,
            lower=lower,
            upper=upper,
            confidence_level=self.confidence_level,
            n_test=len(y_true),
            cv_auc=model.cv_auc,
            metrics=self.threshold_metrics(y_true, y_proba),
        )

        if self.verbose:
            self.logger.info(
                f"{model.name}: test ROC-AUC {auc:.4f} "
                f"({self.confidence_level:.0%} CI {lower:.4f}-{upper:.4f})"
            )
        return result

    def evaluate_all(
        self, models: Sequence[FittedModel], X_df: pd.DataFrame, y_true: np.ndarray
    ) -> tuple[list[EvaluationResult], list[ModelFailure]]:
        results: list[EvaluationResult] = []
        failures: list[ModelFailure] = []
        for model in models:
            try:
                results.append(self.evaluate(model, X_df, y_true))
            except EvaluationFailure as err:
                self.logger.warning(f"Evaluation failed for {err.model_name}: {err.reason}")
                failures.append(ModelFailure.from_error(err, stage="evaluation"))
        return results, failures
