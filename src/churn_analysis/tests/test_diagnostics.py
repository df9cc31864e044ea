import numpy as np

from churn_analysis.diagnostics import learning_curve_table
from churn_analysis.model_registry import REGISTRY
from churn_analysis.model_trainer import ModelTrainer
from churn_analysis.partitioner import Partitioner


def test_learning_curve_table_shape(features_telco):
    X_train, y_train, _, _ = Partitioner(0.8, random_state=0).split(features_telco, "Churn").xy("Churn")
    fitted = ModelTrainer(n_splits=3, n_repeats=1, random_state=0).fit(
        REGISTRY["naive_bayes"], X_train, y_train
    )

    table = learning_curve_table(fitted, X_train, y_train, n_splits=3, train_sizes=np.linspace(0.4, 1.0, 3))

    assert list(table.columns) == ["model", "train_size", "train_auc", "train_auc_std", "val_auc", "val_auc_std"]
    assert len(table) == 3
    assert (table["model"] == "naive_bayes").all()
    assert table["train_size"].is_monotonic_increasing
    assert table["val_auc"].between(0, 1).all()
