"""
Telco Customer Churn — Model Comparison Pipeline

This package prepares the IBM Telco churn table, splits it with a
stratified seed, trains competing classifiers with repeated stratified
k-fold cross-validation and ranks them by test ROC-AUC with bootstrap
confidence intervals.

Modules:
    config            — Load YAML configuration into an immutable Config.
    errors            — Schema, validation, training and evaluation errors.
    schema            — Expected columns of the churn table.
    data_loader       — Read, validate and clean the CSV.
    feature_engineer  — Contract-expiry flag and other derived covariates.
    preprocessor      — Impute, encode, and scale features.
    partitioner       — Stratified, seeded train/test split.
    model_registry    — Named model specs and their search spaces.
    hyper_tuner       — Tune hyperparameters with Optuna.
    model_trainer     — Repeated k-fold CV model selection and refit.
    evaluator         — Test ROC-AUC with bootstrap confidence interval.
    comparator        — Rank models and build the report.
    diagnostics       — Learning curves.
    survival          — Kaplan-Meier and Cox summaries of tenure.
    pipeline          — Orchestrates all components.
    utils.logger      — Unified timestamped console logger.
"""

from .config import Config
from .errors import EvaluationFailure, SchemaError, TrainingFailure, ValidationError
from .data_loader import DataLoader
from .feature_engineer import FeatureEngineer
from .preprocessor import Preprocessor
from .partitioner import Partitioner, Split
from .model_registry import REGISTRY, ModelKind, ModelSpec, get_specs
from .hyper_tuner import HyperTuner
from .model_trainer import FittedModel, ModelTrainer
from .evaluator import EvaluationResult, Evaluator
from .comparator import ComparisonReport, rank_models
from .survival import SurvivalAnalyzer
from .pipeline import PipelineRunner

__all__ = [
    "Config",
    "SchemaError",
    "ValidationError",
    "TrainingFailure",
    "EvaluationFailure",
    "DataLoader",
    "FeatureEngineer",
    "Preprocessor",
    "Partitioner",
    "Split",
    "REGISTRY",
    "ModelKind",
    "ModelSpec",
    "get_specs",
    "HyperTuner",
    "ModelTrainer",
    "FittedModel",
    "Evaluator",
    "EvaluationResult",
    "ComparisonReport",
    "rank_models",
    "SurvivalAnalyzer",
    "PipelineRunner",
]
