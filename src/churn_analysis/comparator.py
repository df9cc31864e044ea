import json
import math
import os
from dataclasses import asdict, dataclass, field
from typing import Iterable, List

import pandas as pd

from .errors import ModelFailure
from .evaluator import EvaluationResult


@dataclass(frozen=True)
class RankedModel:
    rank: int
    name: str
    auc: float
    lower: float
    upper: float
    cv_auc: float


def _sort_key(result: EvaluationResult) -> tuple:
    # NaN widths (no usable bootstrap sample) sort after any real interval
    width = result.width if not math.isnan(result.width) else math.inf
    return (-result.auc, width, result.name)


def rank_models(results: Iterable[EvaluationResult]) -> List[RankedModel]:
    """
    Order results by test ROC-AUC, descending. Ties go to the narrower
    confidence interval, then to the name, so the order is total and
    identical inputs always rank identically.
    """
    ordered = sorted(results, key=_sort_key)
    return [
        RankedModel(
            rank=i,
            name=r.name,
            auc=r.auc,
            lower=r.lower,
            upper=r.upper,
            cv_auc=r.cv_auc,
        )
        for i, r in enumerate(ordered, start=1)
    ]


@dataclass(frozen=True)
class ComparisonReport:
    """Ranked models plus the models that dropped out along the way."""
    ranking: List[RankedModel]
    failures: List[ModelFailure] = field(default_factory=list)
    confidence_level: float = 0.95

    @classmethod
    def from_results(
        cls,
        results: Iterable[EvaluationResult],
        failures: Iterable[ModelFailure] = (),
        confidence_level: float = 0.95,
    ) -> "ComparisonReport":
        return cls(
            ranking=rank_models(results),
            failures=list(failures),
            confidence_level=confidence_level,
        )

    @property
    def best(self) -> RankedModel:
        if not self.ranking:
            raise ValueError("No model was ranked; every model failed")
        return self.ranking[0]

    def to_frame(self) -> pd.DataFrame:
        columns = ["rank", "name", "auc", "lower", "upper", "cv_auc"]
        return pd.DataFrame([asdict(r) for r in self.ranking], columns=columns)

    def format(self) -> str:
        level = f"{self.confidence_level:.0%}"
        lines = [f"{'rank':>4}  {'model':<16} {'ROC-AUC':>8}  {level + ' CI':>17}  {'CV AUC':>7}"]
        for r in self.ranking:
            lines.append(
                f"{r.rank:>4}  {r.name:<16} {r.auc:>8.4f}  "
                f"[{r.lower:.4f}, {r.upper:.4f}]  {r.cv_auc:>7.4f}"
            )
        for f in self.failures:
            lines.append(f"   -  {f.name:<16} {f.stage} failed: {f.reason}")
        return "\n".join(lines)

    def save(self, path: str) -> str:
        """Write the ranking as CSV (for .csv paths) or the full report as JSON."""
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        if path.endswith(".csv"):
            self.to_frame().to_csv(path, index=False)
        else:
            payload = {
                "confidence_level": self.confidence_level,
                "ranking": [asdict(r) for r in self.ranking],
                "failures": [asdict(f) for f in self.failures],
            }
            with open(path, "w") as f:
                json.dump(payload, f, indent=4)
        return path
