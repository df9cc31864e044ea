import numpy as np
import pandas as pd

from churn_analysis.preprocessor import Preprocessor


def _make_small_X():
    return pd.DataFrame(
        {
            # continuous numeric
            "tenure": [1.0, 24.0, np.nan, 60.0],
            "MonthlyCharges": [29.85, np.nan, 104.8, 56.95],

            # binary numeric
            "SeniorCitizen": [1, 0, np.nan, 0],
            "ContractExpired": [True, False, True, False],

            # categorical
            "Contract": ["Month-to-month", "Two year", np.nan, "One year"],
            "InternetService": ["DSL", "Fiber optic", "No", "DSL"],
        }
    )


def _dense(Xt):
    return Xt.toarray() if hasattr(Xt, "toarray") else Xt


def test_preprocessor_build_returns_column_transformer():
    X = _make_small_X()
    transformer = Preprocessor(impute_strategy="median").build(X)
    assert transformer is not None


def test_preprocessor_fit_transform_preserves_row_count_and_no_nans():
    X = _make_small_X()
    transformer = Preprocessor(impute_strategy="median").build(X)

    Xt = transformer.fit_transform(X)
    assert Xt.shape[0] == X.shape[0]
    assert np.isfinite(_dense(Xt).astype(float)).all()


def test_preprocessor_transform_handles_unseen_categories():
    X_train = _make_small_X()
    X_test = pd.DataFrame(
        {
            "tenure": [5.0],
            "MonthlyCharges": [70.0],
            "SeniorCitizen": [0],
            "ContractExpired": [True],
            "Contract": ["Ten year"],          # unseen category
            "InternetService": ["Satellite"],  # unseen category
        }
    )

    transformer = Preprocessor(impute_strategy="median").build(X_train)
    transformer.fit(X_train)

    Xt_test = transformer.transform(X_test)
    assert Xt_test.shape[0] == 1


def test_preprocessor_routes_bool_and_01_columns_to_binary():
    X = _make_small_X()
    transformer = Preprocessor(impute_strategy="median").build(X)

    groups = {name: cols for name, _, cols in transformer.transformers}
    assert groups["num"] == ["tenure", "MonthlyCharges"]
    assert groups["bin"] == ["SeniorCitizen", "ContractExpired"]
    assert groups["cat"] == ["Contract", "InternetService"]


def test_preprocessor_dense_output_is_centred_and_scaled():
    X = _make_small_X().fillna({"tenure": 12.0, "MonthlyCharges": 70.0})

    transformer = Preprocessor(use_scaler=True, dense=True).build(X)
    Xt = transformer.fit_transform(X)

    assert isinstance(Xt, np.ndarray)
    # the first two output columns are the scaled continuous features
    assert np.allclose(Xt[:, :2].mean(axis=0), 0.0)
    assert np.allclose(Xt[:, :2].std(axis=0), 1.0)


def test_preprocessor_sparse_by_default_keeps_one_hot_sparse():
    X = pd.DataFrame({"PaymentMethod": ["a", "b", "c", "d", "e"] * 6})
    Xt = Preprocessor().build(X).fit_transform(X)
    assert hasattr(Xt, "toarray")
