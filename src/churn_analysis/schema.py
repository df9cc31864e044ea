from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from .errors import SchemaError


@dataclass(frozen=True)
class FeatureSpec:
    numeric: Sequence[str]
    categorical: Sequence[str]
    target: str
    id_col: str | None = None

    @property
    def covariates(self) -> list[str]:
        return list(self.numeric) + list(self.categorical)

    def validate(self, df: pd.DataFrame) -> None:
        """Raise SchemaError unless df holds exactly the covariates, target and (optional) id."""
        required = self.covariates + [self.target]
        allowed = set(required) | ({self.id_col} if self.id_col else set())

        missing = [c for c in required if c not in df.columns]
        unexpected = [c for c in df.columns if c not in allowed]

        if missing:
            raise SchemaError(f"Missing columns: {missing}")
        if unexpected:
            raise SchemaError(f"Unexpected columns: {unexpected}")


TELCO_SPEC = FeatureSpec(
    numeric=["SeniorCitizen", "tenure", "MonthlyCharges", "TotalCharges"],
    categorical=[
        "gender",
        "Partner",
        "Dependents",
        "PhoneService",
        "MultipleLines",
        "InternetService",
        "OnlineSecurity",
        "OnlineBackup",
        "DeviceProtection",
        "TechSupport",
        "StreamingTV",
        "StreamingMovies",
        "Contract",
        "PaperlessBilling",
        "PaymentMethod",
    ],
    target="Churn",
    id_col="customerID",
)

# Add-on services counted by FeatureEngineer
SERVICE_COLUMNS = [
    "PhoneService",
    "MultipleLines",
    "OnlineSecurity",
    "OnlineBackup",
    "DeviceProtection",
    "TechSupport",
    "StreamingTV",
    "StreamingMovies",
]
