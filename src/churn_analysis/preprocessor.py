from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.impute import SimpleImputer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import FunctionTransformer, OneHotEncoder, StandardScaler

from churn_analysis.utils.logger import get_logger


class Preprocessor:
    """Builds a ColumnTransformer for numeric/binary/categorical features."""

    def __init__(
        self,
        impute_strategy: str = "median",
        use_scaler: bool = False,
        dense: bool = False,
        verbose: bool = False,
    ):
        """
        Parameters
        ----------
        impute_strategy:
            Strategy for continuous numeric imputation (median/mean/most_frequent).
        use_scaler:
            Whether to centre and scale continuous numeric features. Needed for
            penalized linear models, unnecessary for trees.
        dense:
            If True, the transformer always returns a dense array (required by
            GaussianNB and by centring). Otherwise one-hot output stays sparse.
        verbose:
            If True, logs detected feature groups.
        """
        self.impute_strategy = impute_strategy
        self.use_scaler = use_scaler
        self.dense = dense
        self.verbose = verbose
        self.logger = get_logger(self.__class__.__name__)
        self.transformer: Optional[ColumnTransformer] = None

    def build(self, X: pd.DataFrame) -> ColumnTransformer:
        """Build (but do not fit) the preprocessing transformer."""
        numeric_cols = X.select_dtypes(include=["number", "bool"]).columns.tolist()
        categorical_cols = X.select_dtypes(include=["object", "string", "category"]).columns.tolist()

        # binary numeric columns: values subset of {0,1} (ignoring NaNs)
        binary_cols = [
            col for col in numeric_cols
            if set(pd.Series(X[col]).dropna().unique()).issubset({0, 1})
        ]
        continuous_cols = [col for col in numeric_cols if col not in binary_cols]

        num_steps = [("imputer", SimpleImputer(strategy=self.impute_strategy))]
        if self.use_scaler:
            # centring a sparse matrix would densify it
            num_steps.append(("scaler", StandardScaler(with_mean=self.dense)))
        num_pipe = Pipeline(steps=num_steps)

        bin_pipe = Pipeline(
            steps=[
                ("cast", FunctionTransformer(
                    np.asarray, kw_args={"dtype": float}, feature_names_out="one-to-one"
                )),
                ("imputer", SimpleImputer(strategy="most_frequent")),
            ]
        )

        cat_pipe = Pipeline(
            steps=[
                ("imputer", SimpleImputer(strategy="most_frequent")),
                ("encoder", OneHotEncoder(handle_unknown="ignore", sparse_output=not self.dense)),
            ]
        )

        self.transformer = ColumnTransformer(
            transformers=[
                ("num", num_pipe, continuous_cols),
                ("bin", bin_pipe, binary_cols),
                ("cat", cat_pipe, categorical_cols),
            ],
            remainder="drop",
            sparse_threshold=0.0 if self.dense else 0.3,
        )

        if self.verbose:
            self.logger.info(
                f"Columns detected: continuous={len(continuous_cols)}, "
                f"binary={len(binary_cols)}, categorical={len(categorical_cols)}"
            )

        return self.transformer
