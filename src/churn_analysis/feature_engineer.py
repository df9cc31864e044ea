import numpy as np
import pandas as pd

from .errors import ValidationError
from .schema import SERVICE_COLUMNS


# Nominal term, in months, of each contract type
CONTRACT_TERMS = {
    "Month-to-month": 1,
    "One year": 12,
    "Two year": 24,
}


def contract_expired(contract: str, tenure: float) -> bool:
    """True once tenure reaches the nominal term of the contract."""
    if contract not in CONTRACT_TERMS:
        raise ValidationError(f"Unrecognized contract type: {contract!r}")
    return bool(tenure >= CONTRACT_TERMS[contract])


class FeatureEngineer:
    """Domain-specific feature engineering for telco churn."""

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        out = df.copy()

        if "Contract" in out.columns and "tenure" in out.columns:
            unknown = sorted(set(out["Contract"].dropna().unique()) - set(CONTRACT_TERMS))
            if unknown or out["Contract"].isna().any():
                raise ValidationError(f"Unrecognized contract types: {unknown or [None]}")
            terms = out["Contract"].map(CONTRACT_TERMS)
            out["ContractExpired"] = (out["tenure"] >= terms).astype(bool)

        # Lifetime average spend; brand-new customers have no history yet
        if "TotalCharges" in out.columns and "tenure" in out.columns:
            tenure = out["tenure"].replace(0, np.nan)
            avg = (out["TotalCharges"] / tenure).replace([np.inf, -np.inf], np.nan)
            if "MonthlyCharges" in out.columns:
                avg = avg.fillna(out["MonthlyCharges"])
            out["AvgMonthlySpend"] = avg.fillna(0.0)

        services = [c for c in SERVICE_COLUMNS if c in out.columns]
        if services:
            n_services = (out[services] == "Yes").sum(axis=1)
            if "InternetService" in out.columns:
                n_services += (out["InternetService"].fillna("No") != "No").astype(int)
            out["NumServices"] = n_services.astype(int)

        return out
