"""Error kinds raised by the churn pipeline.

SchemaError and ValidationError are fatal for a run. TrainingFailure and
EvaluationFailure are caught per model so sibling models still get ranked.
"""

from dataclasses import dataclass
from typing import Optional


class SchemaError(ValueError):
    """A required column is missing or an unexpected column is present."""


class ValidationError(ValueError):
    """A value falls outside the set the pipeline knows how to handle."""


class ModelError(RuntimeError):
    def __init__(self, model_name: str, reason: str, cause: Optional[BaseException] = None):
        super().__init__(f"{model_name}: {reason}")
        self.model_name = model_name
        self.reason = reason
        self.__cause__ = cause


class TrainingFailure(ModelError):
    """Non-convergence, a degenerate fold, or an estimator error during fitting."""


class EvaluationFailure(ModelError):
    """The model did not produce a usable probability for every test record."""


@dataclass(frozen=True)
class ModelFailure:
    """A model dropped from the ranking, kept for the report."""
    name: str
    stage: str
    reason: str

    @classmethod
    def from_error(cls, err: ModelError, stage: str) -> "ModelFailure":
        return cls(name=err.model_name, stage=stage, reason=err.reason)
