import numpy as np
import pandas as pd
from sklearn.model_selection import StratifiedKFold, learning_curve

from .model_trainer import FittedModel


def learning_curve_table(
    model: FittedModel,
    X_df: pd.DataFrame,
    y: np.ndarray,
    n_splits: int = 5,
    train_sizes=np.linspace(0.1, 1.0, 5),
    random_state: int = 42,
    n_jobs: int = 1,
) -> pd.DataFrame:
    """
    Train/validation ROC-AUC of the model's selected configuration as the
    training set grows. A persistent gap between the two columns points to
    overfitting; two low, converged columns to underfitting.

    Scores come from a single shuffled stratified ``n_splits``-fold pass
    (the pipeline passes its own fold count).
    """
    cv = StratifiedKFold(n_splits=n_splits, shuffle=True, random_state=random_state)
    sizes, train_scores, val_scores = learning_curve(
        model.pipeline,
        X_df,
        np.asarray(y).astype(int),
        cv=cv,
        scoring="roc_auc",
        train_sizes=train_sizes,
        shuffle=True,
        random_state=random_state,
        n_jobs=n_jobs,
    )
    return pd.DataFrame(
        {
            "model": model.name,
            "train_size": sizes,
            "train_auc": train_scores.mean(axis=1),
            "train_auc_std": train_scores.std(axis=1),
            "val_auc": val_scores.mean(axis=1),
            "val_auc_std": val_scores.std(axis=1),
        }
    )
