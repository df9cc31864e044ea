import dataclasses
from pathlib import Path

import pytest

from churn_analysis.config import Config

DEFAULT_YAML = Path(__file__).resolve().parents[3] / "config" / "default.yaml"


def test_defaults():
    cfg = Config()
    assert (cfg.n_splits, cfg.n_repeats, cfg.train_fraction) == (10, 3, 0.8)
    assert cfg.confidence_level == 0.95
    assert cfg.model_names == ("glmnet", "naive_bayes", "random_forest")


def test_from_yaml(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "data:\n"
        "  path: data/telco.csv\n"
        "validation:\n"
        "  n_splits: 5\n"
        "  random_state: 7\n"
        "model:\n"
        "  names: [glmnet, lightgbm]\n"
    )
    cfg = Config.from_yaml(str(path))

    assert cfg.data_path == "data/telco.csv"
    assert cfg.n_splits == 5
    assert cfg.random_state == 7
    assert cfg.model_names == ("glmnet", "lightgbm")
    assert cfg.n_repeats == 3


def test_default_yaml_loads():
    cfg = Config.from_yaml(str(DEFAULT_YAML))
    assert cfg.n_splits == 10 and cfg.n_repeats == 3


def test_config_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Config().n_splits = 4


def test_with_overrides_returns_new_config():
    base = Config()
    other = base.with_overrides(n_splits=5)
    assert other.n_splits == 5 and base.n_splits == 10


@pytest.mark.parametrize(
    "section",
    [{"validation": {"n_folds": 5}}, {"plots": {"enabled": True}}],
)
def test_unknown_keys_are_rejected(section):
    with pytest.raises(ValueError, match="Unknown"):
        Config.from_dict(section)


@pytest.mark.parametrize(
    "overrides",
    [
        {"train_fraction": 1.0},
        {"confidence_level": 0.0},
        {"n_splits": 1},
        {"n_repeats": 0},
        {"model_names": []},
    ],
)
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValueError):
        Config(**overrides)
