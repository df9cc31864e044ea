import numpy as np
import pandas as pd
import pytest

from churn_analysis.data_loader import DataLoader
from churn_analysis.feature_engineer import FeatureEngineer


def _telco_frame(n: int = 300, seed: int = 0, n_blank: int = 0) -> pd.DataFrame:
    """Raw telco-shaped table with a real churn signal (contract, tenure, fiber)."""
    rng = np.random.default_rng(seed)

    contract = rng.choice(["Month-to-month", "One year", "Two year"], size=n, p=[0.55, 0.21, 0.24])
    tenure = rng.integers(1, 73, size=n)
    tenure[:n_blank] = 0
    internet = rng.choice(["DSL", "Fiber optic", "No"], size=n, p=[0.34, 0.44, 0.22])
    phone = rng.choice(["Yes", "No"], size=n, p=[0.9, 0.1])
    monthly = np.round(rng.uniform(18.0, 118.0, size=n), 2)
    total = np.round(monthly * tenure, 2).astype(str)
    total[:n_blank] = " "

    logit = (
        -1.0
        + 1.8 * (contract == "Month-to-month")
        - 0.04 * tenure
        + 0.9 * (internet == "Fiber optic")
    )
    churn = rng.random(n) < 1.0 / (1.0 + np.exp(-logit))

    def yes_no():
        return rng.choice(["Yes", "No"], size=n)

    def internet_addon():
        return np.where(internet == "No", "No internet service", yes_no())

    return pd.DataFrame(
        {
            "customerID": [f"{i:04d}-TELCO" for i in range(n)],
            "gender": rng.choice(["Female", "Male"], size=n),
            "SeniorCitizen": rng.choice([0, 1], size=n, p=[0.84, 0.16]),
            "Partner": yes_no(),
            "Dependents": yes_no(),
            "tenure": tenure,
            "PhoneService": phone,
            "MultipleLines": np.where(phone == "No", "No phone service", yes_no()),
            "InternetService": internet,
            "OnlineSecurity": internet_addon(),
            "OnlineBackup": internet_addon(),
            "DeviceProtection": internet_addon(),
            "TechSupport": internet_addon(),
            "StreamingTV": internet_addon(),
            "StreamingMovies": internet_addon(),
            "Contract": contract,
            "PaperlessBilling": yes_no(),
            "PaymentMethod": rng.choice(
                ["Electronic check", "Mailed check", "Bank transfer (automatic)", "Credit card (automatic)"],
                size=n,
            ),
            "MonthlyCharges": monthly,
            "TotalCharges": total,
            "Churn": np.where(churn, "Yes", "No"),
        }
    )


@pytest.fixture
def make_telco():
    return _telco_frame


@pytest.fixture
def raw_telco():
    return _telco_frame(n=300, seed=0, n_blank=3)


@pytest.fixture
def clean_telco(raw_telco):
    return DataLoader(path="unused.csv").clean(raw_telco)


@pytest.fixture
def features_telco(clean_telco):
    return FeatureEngineer().transform(clean_telco)
