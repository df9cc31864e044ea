import numpy as np
import pandas as pd
import pytest

from churn_analysis.errors import ValidationError
from churn_analysis.feature_engineer import CONTRACT_TERMS, FeatureEngineer, contract_expired


@pytest.mark.parametrize(
    "contract, tenure, expected",
    [
        ("Month-to-month", 0, False),
        ("Month-to-month", 1, True),
        ("One year", 11, False),
        ("One year", 12, True),
        ("Two year", 23, False),
        ("Two year", 24, True),
        ("Two year", 72, True),
    ],
)
def test_contract_expired_at_term_boundaries(contract, tenure, expected):
    assert contract_expired(contract, tenure) is expected


def test_contract_expired_rejects_unknown_contract():
    with pytest.raises(ValidationError):
        contract_expired("Three year", 40)


def test_feature_engineer_adds_expected_columns(clean_telco):
    out = FeatureEngineer().transform(clean_telco)

    assert {"ContractExpired", "AvgMonthlySpend", "NumServices"}.issubset(out.columns)
    assert out["ContractExpired"].dtype == bool


def test_contract_expired_column_matches_scalar_rule(clean_telco):
    out = FeatureEngineer().transform(clean_telco)
    expected = [contract_expired(c, t) for c, t in zip(out["Contract"], out["tenure"])]
    assert out["ContractExpired"].tolist() == expected


def test_feature_engineer_does_not_change_row_count(clean_telco):
    out = FeatureEngineer().transform(clean_telco)
    assert len(out) == len(clean_telco)


def test_feature_engineer_does_not_mutate_input_df(clean_telco):
    df_before = clean_telco.copy(deep=True)
    _ = FeatureEngineer().transform(clean_telco)
    pd.testing.assert_frame_equal(clean_telco, df_before)


def test_feature_engineer_rejects_unknown_contract(clean_telco):
    df = clean_telco.copy()
    df.loc[0, "Contract"] = "Lifetime"
    with pytest.raises(ValidationError, match="Lifetime"):
        FeatureEngineer().transform(df)


def test_avg_monthly_spend_is_finite_for_new_customers():
    df = pd.DataFrame(
        {
            "tenure": [0, 10],
            "Contract": ["Month-to-month", "One year"],
            "MonthlyCharges": [50.0, 80.0],
            "TotalCharges": [0.0, 700.0],
        }
    )
    out = FeatureEngineer().transform(df)

    assert np.isfinite(out["AvgMonthlySpend"]).all()
    assert out.loc[0, "AvgMonthlySpend"] == pytest.approx(50.0)
    assert out.loc[1, "AvgMonthlySpend"] == pytest.approx(70.0)


def test_num_services_counts_subscriptions():
    df = pd.DataFrame(
        {
            "PhoneService": ["Yes", "No"],
            "MultipleLines": ["Yes", "No phone service"],
            "InternetService": ["Fiber optic", "No"],
            "OnlineSecurity": ["Yes", "No internet service"],
            "StreamingTV": ["No", "No internet service"],
        }
    )
    out = FeatureEngineer().transform(df)
    # phone + multiple lines + internet + security
    assert out["NumServices"].tolist() == [4, 0]


def test_contract_terms_are_monotonic():
    terms = [CONTRACT_TERMS[c] for c in ("Month-to-month", "One year", "Two year")]
    assert terms == sorted(terms)
