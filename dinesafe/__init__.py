"""
Toronto Dinesafe Inspection Report
==================================

Descriptive statistics and two classifiers over Toronto's Dinesafe
food-establishment inspection records.

Modules:
- data_loader: Data ingestion and type coercion
- feature_engineering: Severity, status and inspection-requirement fields
- aggregation: Pass rates by type and severity rankings
- model_training: Decision tree and random forest training and evaluation
- report: End-to-end run collecting the report outputs

Example usage:
    from dinesafe.data_loader import DinesafeDataLoader
    from dinesafe.feature_engineering import FeatureEngineer
    from dinesafe.aggregation import InspectionAggregator
    from dinesafe.model_training import ModelTrainer

    # Load data
    loader = DinesafeDataLoader()
    df = loader.load("data/raw/dinesafe.csv")

    # Derive features
    df_features = FeatureEngineer().create_all_features(df)

    # Aggregate
    agg = InspectionAggregator()
    pass_rates = agg.pass_rate_by_type(df_features)
    ranking = agg.severity_ranking(df_features)

    # Train models
    trainer = ModelTrainer()
    results = trainer.train_all_models(df_features)
"""

__version__ = "1.0.0"
__author__ = "[Your Name]"

from .aggregation import InspectionAggregator, SeveritySummary
from .data_loader import DinesafeDataLoader
from .exceptions import (
    DataSourceError,
    DinesafeError,
    FeatureError,
    ModelTrainingError,
    SchemaError,
)
from .feature_engineering import EstablishmentStatus, FeatureEngineer, MinInspections, Severity
from .model_training import ModelTrainer
from .report import DinesafeReport, build_report
from .utils import Timer

__all__ = [
    'DinesafeDataLoader',
    'FeatureEngineer',
    'InspectionAggregator',
    'ModelTrainer',
    'DinesafeReport',
    'build_report',
    'Severity',
    'EstablishmentStatus',
    'MinInspections',
    'SeveritySummary',
    'DinesafeError',
    'DataSourceError',
    'SchemaError',
    'FeatureError',
    'ModelTrainingError',
    'Timer'
]
