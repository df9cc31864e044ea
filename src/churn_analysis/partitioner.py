from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from .errors import ValidationError
from .utils.logger import get_logger


@dataclass(frozen=True)
class Split:
    train: pd.DataFrame
    test: pd.DataFrame

    def xy(self, target: str) -> tuple[pd.DataFrame, np.ndarray, pd.DataFrame, np.ndarray]:
        """Return X_train, y_train, X_test, y_test."""
        return (
            self.train.drop(columns=[target]),
            self.train[target].astype(int).to_numpy(),
            self.test.drop(columns=[target]),
            self.test[target].astype(int).to_numpy(),
        )


class Partitioner:
    """Stratified, seeded train/test split that preserves the class ratio."""

    def __init__(self, train_fraction: float = 0.8, random_state: int = 42):
        if not 0.0 < train_fraction < 1.0:
            raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")
        self.train_fraction = train_fraction
        self.random_state = random_state
        self.logger = get_logger(self.__class__.__name__)

    def split(self, df: pd.DataFrame, target: str) -> Split:
        y = df[target]
        if y.isna().any():
            raise ValidationError(f"{int(y.isna().sum())} records have no '{target}' label")

        counts = y.value_counts()
        if len(counts) < 2:
            raise ValidationError(f"'{target}' has a single class; cannot stratify")
        if counts.min() < 2:
            raise ValidationError(
                f"Class {counts.idxmin()!r} has a single record; cannot stratify"
            )

        train, test = train_test_split(
            df,
            train_size=self.train_fraction,
            stratify=y,
            random_state=self.random_state,
        )

        self.logger.info(
            f"Split {len(df):,} rows -> train={len(train):,} "
            f"(positive rate {train[target].mean():.4f}), "
            f"test={len(test):,} (positive rate {test[target].mean():.4f})"
        )
        return Split(train=train, test=test)
