from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple

import yaml

# YAML section -> {yaml key: Config field}
SECTIONS: Dict[str, Dict[str, str]] = {
    "data": {
        "path": "data_path",
        "target_col": "target_col",
        "id_col": "id_col",
        "sample_size": "sample_size",
    },
    "validation": {
        "n_splits": "n_splits",
        "n_repeats": "n_repeats",
        "train_fraction": "train_fraction",
        "random_state": "random_state",
        "n_jobs": "n_jobs",
    },
    "evaluation": {
        "confidence_level": "confidence_level",
        "n_bootstrap": "n_bootstrap",
    },
    "model": {
        "names": "model_names",
        "max_iter": "max_iter",
        "n_trials": "n_trials",
    },
    "diagnostics": {
        "learning_curve": "learning_curve",
    },
    "survival": {
        "enabled": "survival",
    },
    "output": {
        "report_path": "report_path",
        "model_dir": "model_dir",
    },
}


@dataclass(frozen=True)
class Config:
    """Immutable run configuration loaded from YAML.

    One instance is built per run and handed to every stage; nothing
    downstream mutates it. Use ``with_overrides`` to derive a variant.
    """
    data_path: str = "data/WA_Fn-UseC_-Telco-Customer-Churn.csv"
    target_col: str = "Churn"
    id_col: str = "customerID"
    sample_size: Optional[int] = None

    n_splits: int = 10
    n_repeats: int = 3
    train_fraction: float = 0.8
    random_state: int = 42
    n_jobs: int = 1

    confidence_level: float = 0.95
    n_bootstrap: int = 2000

    model_names: Tuple[str, ...] = ("glmnet", "naive_bayes", "random_forest")
    max_iter: int = 1000
    n_trials: int = 20

    learning_curve: bool = False
    survival: bool = False

    report_path: Optional[str] = "artifacts/model_ranking.csv"
    model_dir: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "model_names", tuple(self.model_names))

        if not 0.0 < self.train_fraction < 1.0:
            raise ValueError(f"train_fraction must be in (0, 1), got {self.train_fraction}")
        if not 0.0 < self.confidence_level < 1.0:
            raise ValueError(f"confidence_level must be in (0, 1), got {self.confidence_level}")
        if self.n_splits < 2:
            raise ValueError(f"n_splits must be at least 2, got {self.n_splits}")
        if self.n_repeats < 1:
            raise ValueError(f"n_repeats must be at least 1, got {self.n_repeats}")
        if self.n_bootstrap < 1:
            raise ValueError(f"n_bootstrap must be at least 1, got {self.n_bootstrap}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be at least 1, got {self.max_iter}")
        if not self.model_names:
            raise ValueError("model_names must list at least one model")

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "Config":
        kwargs: Dict[str, Any] = {}
        for section, values in (cfg or {}).items():
            if section not in SECTIONS:
                raise ValueError(f"Unknown config section: {section}")
            for key, value in (values or {}).items():
                if key not in SECTIONS[section]:
                    raise ValueError(f"Unknown config key: {section}.{key}")
                kwargs[SECTIONS[section][key]] = value
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        with open(path, "r") as f:
            cfg = yaml.safe_load(f)
        return cls.from_dict(cfg)

    def with_overrides(self, **overrides: Any) -> "Config":
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
