import os
import warnings
from typing import Dict, List, Optional, Union

import pandas as pd

from .comparator import ComparisonReport
from .config import Config
from .data_loader import DataLoader
from .diagnostics import learning_curve_table
from .evaluator import EvaluationResult, Evaluator
from .feature_engineer import FeatureEngineer
from .model_registry import get_specs
from .model_trainer import FittedModel, ModelTrainer
from .partitioner import Partitioner, Split
from .survival import SurvivalAnalyzer
from .utils.logger import get_logger


class PipelineRunner:
    """End-to-end telco churn model comparison.

    Steps:
      1. Load, validate and clean the customer table
      2. Optionally summarise time-to-churn (Kaplan-Meier, Cox)
      3. Derive engineered covariates (contract expiry, spend, services)
      4. Stratified train/test split from the configured seed
      5. Train every configured model with repeated stratified k-fold CV
      6. Optionally compute learning curves on the training subset
      7. Evaluate on the test subset (ROC-AUC + bootstrap CI)
      8. Rank the models and save the report"""

    def __init__(self, config: Union[str, Config]):
        self.config = config if isinstance(config, Config) else Config.from_yaml(config)
        self.logger = get_logger(self.__class__.__name__)
        warnings.filterwarnings(
            "ignore",
            message="X does not have valid feature names",
            category=UserWarning,
            module="sklearn",
        )

        self.split: Optional[Split] = None
        self.fitted_models: List[FittedModel] = []
        self.results: List[EvaluationResult] = []
        self.survival_tables: Dict[str, pd.DataFrame] = {}
        self.learning_curves: Optional[pd.DataFrame] = None

    def _run_survival(self, df: pd.DataFrame) -> None:
        cfg = self.config
        analyzer = SurvivalAnalyzer(event_col=cfg.target_col)
        medians = analyzer.median_tenure_by(df, group_col="Contract")
        hazards = analyzer.cox_hazard_ratios(df)
        self.survival_tables = {"median_tenure": medians, "hazard_ratios": hazards}
        self.logger.info(f"Kaplan-Meier median tenure by contract:\n{medians.to_string(index=False)}")

    def run(self) -> ComparisonReport:
        cfg = self.config
        self.logger.info("Starting churn model comparison")

        # SchemaError / ValidationError propagate: the run cannot continue
        loader = DataLoader(cfg.data_path, cfg.sample_size, random_state=cfg.random_state)
        df = loader.load()
        self.logger.info(f"Loaded dataset: {df.shape[0]:,} rows x {df.shape[1]} cols")

        if cfg.survival:
            self._run_survival(df)

        df = FeatureEngineer().transform(df)

        self.split = Partitioner(cfg.train_fraction, cfg.random_state).split(df, cfg.target_col)
        X_train, y_train, X_test, y_test = self.split.xy(cfg.target_col)

        trainer = ModelTrainer(
            n_splits=cfg.n_splits,
            n_repeats=cfg.n_repeats,
            random_state=cfg.random_state,
            max_iter=cfg.max_iter,
            n_trials=cfg.n_trials,
            n_jobs=cfg.n_jobs,
        )
        self.fitted_models, train_failures = trainer.fit_all(get_specs(cfg.model_names), X_train, y_train)

        if cfg.learning_curve and self.fitted_models:
            self.learning_curves = pd.concat(
                [
                    learning_curve_table(
                        m,
                        X_train,
                        y_train,
                        n_splits=cfg.n_splits,
                        random_state=cfg.random_state,
                        n_jobs=cfg.n_jobs,
                    )
                    for m in self.fitted_models
                ],
                ignore_index=True,
            )
            self.logger.info(f"Learning curves:\n{self.learning_curves.to_string(index=False)}")

        if cfg.model_dir:
            for m in self.fitted_models:
                path = m.save(os.path.join(cfg.model_dir, f"{m.name}.joblib"))
                self.logger.info(f"Saved model: {path}")

        evaluator = Evaluator(
            confidence_level=cfg.confidence_level,
            n_bootstrap=cfg.n_bootstrap,
            random_state=cfg.random_state,
        )
        self.results, eval_failures = evaluator.evaluate_all(self.fitted_models, X_test, y_test)

        report = ComparisonReport.from_results(
            self.results,
            failures=train_failures + eval_failures,
            confidence_level=cfg.confidence_level,
        )
        self.logger.info(f"Model ranking (test ROC-AUC):\n{report.format()}")

        if cfg.report_path:
            report.save(cfg.report_path)
            self.logger.info(f"Saved report: {cfg.report_path}")

        self.logger.info("Pipeline finished")
        return report
