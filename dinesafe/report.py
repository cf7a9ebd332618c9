"""
Report Module
=============
Runs the whole pipeline once and collects everything a report renderer
needs: status counts, pass rates by type, the severity ranking, severity
statistics, model evaluation and random forest feature importance.

Example:
    report = build_report("data/raw/dinesafe.csv")
    report.pass_rates.head()

Author: [Your Name]
Date: [Oct 18, 2026]
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

import pandas as pd

from .aggregation import InspectionAggregator, SeveritySummary
from .config import TOP_N_SEVERITY
from .data_loader import DinesafeDataLoader
from .feature_engineering import FeatureEngineer
from .model_training import ModelTrainer
from .utils import Timer, format_large_number, format_statistic

logger = logging.getLogger(__name__)


@dataclass
class DinesafeReport:
    """Collaborator-facing outputs of one pipeline run."""

    pass_rates: pd.DataFrame
    top_severity: pd.DataFrame
    severity_summary: SeveritySummary
    confusion_matrices: Dict[str, pd.DataFrame]
    accuracies: Dict[str, float]
    feature_importance: pd.DataFrame
    n_records: int = 0
    status_counts: pd.Series = field(default_factory=pd.Series)
    tree_rules: str = ''
    model_results: Dict[str, Dict] = field(default_factory=dict)


def build_report(
    source: Optional[str] = None,
    df: Optional[pd.DataFrame] = None,
    trainer: Optional[ModelTrainer] = None
) -> DinesafeReport:
    """
    Load, derive, aggregate and model.

    Args:
        source: CSV path or URL; the Toronto Open Data portal when omitted
        df: Already cleaned inspection table, used instead of loading
        trainer: Model trainer to use (defaults to ModelTrainer())

    Returns:
        DinesafeReport
    """
    if df is None:
        loader = DinesafeDataLoader()
        with Timer("Data loading"):
            df = loader.load(source) if source else loader.load_from_portal()

    with Timer("Feature derivation"):
        df_features = FeatureEngineer().create_all_features(df)

    aggregator = InspectionAggregator()
    with Timer("Aggregation"):
        status_counts = aggregator.status_counts(df_features)
        pass_rates = aggregator.pass_rate_by_type(df_features)
        ranking = aggregator.severity_ranking(df_features)
        summary = aggregator.severity_summary(ranking)

    trainer = trainer or ModelTrainer()
    with Timer("Model training"):
        results = trainer.train_all_models(df_features)

    return DinesafeReport(
        pass_rates=pass_rates,
        top_severity=ranking.head(TOP_N_SEVERITY),
        severity_summary=summary,
        confusion_matrices={name: r['confusion_matrix'] for name, r in results.items()},
        accuracies={name: r['accuracy'] for name, r in results.items()},
        feature_importance=trainer.get_feature_importance(),
        n_records=len(df_features),
        status_counts=status_counts,
        tree_rules=trainer.export_tree_rules(),
        model_results=results,
    )


def print_report(report: DinesafeReport) -> None:
    """Print the report tables to the console."""

    print("\n" + "="*60)
    print(f"DINESAFE REPORT ({format_large_number(report.n_records)} records)")
    print("="*60)

    print("\nInspections by establishment status:")
    for status, count in report.status_counts.items():
        print(f"  {status}: {count:,}")

    print("\nChance to pass by establishment type (lowest first):")
    print(report.pass_rates.to_string(index=False))

    print(f"\nTop {len(report.top_severity)} establishments by severity score:")
    print(report.top_severity.to_string(index=False))

    s = report.severity_summary
    print("\nSeverity score statistics:")
    print(f"  All establishments ({s.n_all:,}): mean {format_statistic(s.mean_all)}, "
          f"SD {format_statistic(s.sd_all)}")
    print(f"  Non-zero scores ({s.n_nonzero:,}): mean {format_statistic(s.mean_nonzero)}, "
          f"SD {format_statistic(s.sd_nonzero)}")

    for name, cm in report.confusion_matrices.items():
        label = report.model_results[name]['model_name'] if report.model_results else name
        print(f"\n{label} confusion matrix (accuracy {report.accuracies[name]:.3f}):")
        print(cm.to_string())

    print("\nRandom forest feature importance:")
    print(report.feature_importance.to_string(index=False))


def main(source: Optional[str] = None):
    """Run the pipeline and print the report."""
    report = build_report(source)
    print_report(report)


if __name__ == "__main__":
    main()
