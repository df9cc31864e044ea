from typing import Optional

import pandas as pd

from .errors import SchemaError, ValidationError
from .schema import TELCO_SPEC, FeatureSpec
from .utils.logger import get_logger

LABEL_MAP = {"No": 0, "Yes": 1}


class DataLoader:
    """Loads the churn CSV, checks its schema and cleans it for modelling."""

    def __init__(
        self,
        path: str,
        sample_size: Optional[int] = None,
        spec: FeatureSpec = TELCO_SPEC,
        random_state: int = 42,
    ):
        self.path = path
        self.sample_size = sample_size
        self.spec = spec
        self.random_state = random_state
        self.logger = get_logger(self.__class__.__name__)

    def load(self) -> pd.DataFrame:
        df = pd.read_csv(self.path)
        if self.sample_size:
            df = df.sample(self.sample_size, random_state=self.random_state)
        return self.clean(df)

    def clean(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Validate the raw schema and return a modelling-ready copy:
        strings stripped, TotalCharges numeric (blanks kept as 0.0 for
        tenure-0 customers, NaN otherwise), label mapped to 0/1 and the
        id column removed. No rows are dropped.
        """
        self.spec.validate(df)
        out = df.copy()

        for col in out.select_dtypes(include=["object", "string"]).columns:
            out[col] = out[col].str.strip()

        target = self.spec.target
        if out[target].isna().any():
            raise ValidationError(f"{int(out[target].isna().sum())} records have no '{target}' label")

        unknown = sorted(set(out[target].unique()) - set(LABEL_MAP))
        if unknown:
            raise ValidationError(f"Unrecognized '{target}' values: {unknown}")
        out[target] = out[target].map(LABEL_MAP).astype(int)

        if "TotalCharges" in out.columns:
            out["TotalCharges"] = pd.to_numeric(out["TotalCharges"], errors="coerce")
            blank = out["TotalCharges"].isna()
            if blank.any():
                # new customers (tenure 0) have not been billed yet
                unbilled = blank & (out["tenure"] == 0)
                out.loc[unbilled, "TotalCharges"] = 0.0
                self.logger.info(
                    f"Blank TotalCharges: {int(unbilled.sum())} set to 0.0 (tenure 0), "
                    f"{int((blank & ~unbilled).sum())} left for imputation"
                )

        for col in self.spec.numeric:
            if not pd.api.types.is_numeric_dtype(out[col]):
                raise SchemaError(f"Column '{col}' must be numeric, got {out[col].dtype}")

        if self.spec.id_col and self.spec.id_col in out.columns:
            out = out.drop(columns=[self.spec.id_col])

        return out.reset_index(drop=True)
