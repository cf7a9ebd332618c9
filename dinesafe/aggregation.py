"""
Aggregation Module
==================
Grouped summary statistics over the derived inspection table.

Views:
1. Pass rate by establishment type (types with at least one failure)
2. Severity ranking of establishments by summed severity score
3. Mean / sample standard deviation of severity scores

Groups are kept in order of first appearance and all sorts are stable,
so equal scores keep their input order.

Author: [Your Name]
Date: [Oct 18, 2026]
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from .config import TOP_N_SEVERITY

logger = logging.getLogger(__name__)

ESTABLISHMENT_KEYS = [
    'establishment_name', 'establishment_address', 'establishment_type', 'min_inspections_numeric'
]


@dataclass(frozen=True)
class SeveritySummary:
    """Severity score statistics over establishment groups; NaN when undefined."""

    mean_all: float
    sd_all: float
    mean_nonzero: float
    sd_nonzero: float
    n_all: int
    n_nonzero: int


class InspectionAggregator:
    """
    Computes the grouped views over a derived inspection table.

    Example:
        agg = InspectionAggregator()
        pass_rates = agg.pass_rate_by_type(df_features)
        ranking = agg.severity_ranking(df_features)
        summary = agg.severity_summary(ranking)
    """

    def pass_rate_by_type(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Chance to pass for each establishment type that failed at least once.

        Args:
            df: Derived inspection DataFrame

        Returns:
            DataFrame with establishment_type, n, num_fail, chance_to_pass,
            lowest chance to pass first
        """
        table = (
            df.groupby('establishment_type', sort=False, dropna=False)
            .agg(
                n=('pass_value', 'size'),
                num_fail=('fail_value', 'sum'),
                num_pass=('pass_value', 'sum'),
            )
            .reset_index()
        )
        table['chance_to_pass'] = table['num_pass'] / table['n']

        table = table[table['num_fail'] != 0]
        table = table.sort_values('chance_to_pass', kind='stable').reset_index(drop=True)

        logger.info(f"{len(table):,} establishment types with at least one failed inspection")
        return table[['establishment_type', 'n', 'num_fail', 'chance_to_pass']]

    def severity_ranking(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Sum of severity values per establishment, highest first.

        Args:
            df: Derived inspection DataFrame

        Returns:
            DataFrame with the establishment keys and severity_score
        """
        ranking = (
            df.groupby(ESTABLISHMENT_KEYS, sort=False, dropna=False)['severity_value']
            .sum()
            .reset_index(name='severity_score')
        )

        # Stable descending order: ties keep their first-appearance order
        order = np.argsort(-ranking['severity_score'].to_numpy(), kind='stable')
        ranking = ranking.iloc[order].reset_index(drop=True)

        logger.info(f"Ranked {len(ranking):,} establishments by severity score")
        return ranking

    def top_severity(self, df: pd.DataFrame, n: int = TOP_N_SEVERITY) -> pd.DataFrame:
        """Top-n slice of the severity ranking."""
        return self.severity_ranking(df).head(n)

    def severity_summary(self, ranking: pd.DataFrame) -> SeveritySummary:
        """
        Mean and sample standard deviation of severity scores, over all
        establishments and over establishments with a non-zero score.

        Args:
            ranking: Output of severity_ranking

        Returns:
            SeveritySummary
        """
        scores = ranking['severity_score'].astype(float)
        nonzero = scores[scores > 0]

        mean_all, sd_all = self._mean_sd(scores, "all establishments")
        mean_nonzero, sd_nonzero = self._mean_sd(nonzero, "establishments with a non-zero score")

        return SeveritySummary(
            mean_all=mean_all,
            sd_all=sd_all,
            mean_nonzero=mean_nonzero,
            sd_nonzero=sd_nonzero,
            n_all=len(scores),
            n_nonzero=len(nonzero),
        )

    @staticmethod
    def _mean_sd(scores: pd.Series, label: str) -> Tuple[float, float]:
        """Mean and n-1 standard deviation; NaN where fewer values exist than needed."""
        if len(scores) == 0:
            logger.warning(f"No scores for {label}; mean and SD are undefined")
            return float('nan'), float('nan')

        mean = float(scores.mean())
        if len(scores) < 2:
            logger.warning(f"Only one score for {label}; sample SD is undefined")
            return mean, float('nan')

        return mean, float(scores.std(ddof=1))

    def status_counts(self, df: pd.DataFrame) -> pd.Series:
        """Number of inspection rows per establishment status."""
        return df['establishment_status'].value_counts(sort=True)
