from typing import Optional, Sequence

import pandas as pd
from lifelines import CoxPHFitter, KaplanMeierFitter

from .utils.logger import get_logger


class SurvivalAnalyzer:
    """
    Time-to-churn summaries with tenure (months) as duration and the churn
    label as the event. Customers still active are right-censored.
    """

    def __init__(
        self,
        duration_col: str = "tenure",
        event_col: str = "Churn",
        penalizer: float = 0.1,
        exclude: Sequence[str] = ("TotalCharges",),
    ):
        self.duration_col = duration_col
        self.event_col = event_col
        self.penalizer = penalizer
        # TotalCharges is roughly tenure x MonthlyCharges, i.e. the duration itself
        self.exclude = tuple(exclude)
        self.logger = get_logger(self.__class__.__name__)
        self.cox_model: Optional[CoxPHFitter] = None

    def _observed(self, df: pd.DataFrame) -> pd.DataFrame:
        out = df[df[self.duration_col] > 0]
        n_dropped = len(df) - len(out)
        if n_dropped:
            self.logger.info(f"Ignoring {n_dropped} customers with zero tenure")
        return out

    def median_tenure_by(self, df: pd.DataFrame, group_col: str = "Contract") -> pd.DataFrame:
        """Kaplan-Meier median tenure per group; inf when fewer than half the group churned."""
        data = self._observed(df)
        rows = []
        for group, part in data.groupby(group_col, sort=True):
            kmf = KaplanMeierFitter()
            kmf.fit(part[self.duration_col], event_observed=part[self.event_col], label=str(group))
            rows.append(
                {
                    group_col: group,
                    "customers": len(part),
                    "churned": int(part[self.event_col].sum()),
                    "median_tenure": float(kmf.median_survival_time_),
                }
            )
        return pd.DataFrame(rows)

    def cox_hazard_ratios(self, df: pd.DataFrame, covariates: Optional[Sequence[str]] = None) -> pd.DataFrame:
        """
        Fit a penalized Cox proportional-hazards model and return hazard
        ratios (exp(coef)) with confidence bounds, highest hazard first.
        Categorical covariates are one-hot encoded against their first level.
        """
        data = self._observed(df)
        if covariates is None:
            covariates = [
                c for c in data.columns
                if c not in (self.duration_col, self.event_col) and c not in self.exclude
            ]

        design = pd.get_dummies(data[list(covariates)], drop_first=True, dtype=float)
        design[self.duration_col] = data[self.duration_col].astype(float)
        design[self.event_col] = data[self.event_col].astype(int)

        cph = CoxPHFitter(penalizer=self.penalizer)
        cph.fit(design, duration_col=self.duration_col, event_col=self.event_col)
        self.cox_model = cph

        self.logger.info(f"Cox model concordance: {cph.concordance_index_:.4f}")

        summary = cph.summary
        keep = ["coef", "exp(coef)", "p"] + [
            c for c in summary.columns if c.startswith(("exp(coef) lower", "exp(coef) upper"))
        ]
        return summary[keep].sort_values("exp(coef)", ascending=False)
