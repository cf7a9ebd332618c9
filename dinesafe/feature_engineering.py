"""
Feature Engineering Module
==========================
Derives indicator and numeric fields from the cleaned Dinesafe table.

Derived columns:
1. severity_value - ordinal harm level of the infraction (0-4)
2. severity_<level> - one-hot flag for each of the five severity levels
3. pass_value / fail_value - status indicators (Conditional Pass is a fail)
4. min_inspections_numeric - required inspections per year, "Other" as 0

Every text field is parsed against a closed set. Anything outside it
raises FeatureError instead of being mapped to a default.

Author: [Your Name]
Date: [Oct 18, 2026]
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import numpy as np
import pandas as pd

from .exceptions import FeatureError, SchemaError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class Severity(Enum):
    """Infraction severity, ordered by harm."""

    BLANK = 0
    NOT_APPLICABLE = 1
    MINOR = 2
    SIGNIFICANT = 3
    CRUCIAL = 4

    @property
    def flag_column(self) -> str:
        return f"severity_{self.name.lower()}"

    @classmethod
    def from_text(cls, text) -> 'Severity':
        if text is None or (isinstance(text, float) and np.isnan(text)):
            return cls.BLANK
        try:
            return SEVERITY_LABELS[str(text).strip()]
        except KeyError:
            raise FeatureError(f"Unrecognized severity {text!r}") from None


SEVERITY_LABELS = {
    '': Severity.BLANK,
    'NA - Not Applicable': Severity.NOT_APPLICABLE,
    'M - Minor': Severity.MINOR,
    'S - Significant': Severity.SIGNIFICANT,
    'C - Crucial': Severity.CRUCIAL,
}


class EstablishmentStatus(Enum):
    """Outcome of an inspection visit."""

    PASS = 'Pass'
    CONDITIONAL_PASS = 'Conditional Pass'
    CLOSED = 'Closed'

    @classmethod
    def from_text(cls, text) -> 'EstablishmentStatus':
        try:
            return cls(str(text).strip())
        except ValueError:
            raise FeatureError(f"Unrecognized establishment status {text!r}") from None

    @property
    def pass_value(self) -> int:
        return int(self is EstablishmentStatus.PASS)

    @property
    def fail_value(self) -> int:
        # Closed counts as neither a pass nor a fail
        return int(self is EstablishmentStatus.CONDITIONAL_PASS)


@dataclass(frozen=True)
class MinInspections:
    """
    Minimum inspections per year: a count, or the "Other" category.

    The "Other" category only becomes 0 when a numeric value is requested.
    """

    count: Optional[int] = None

    OTHER_LABELS = ('O', 'OTHER')

    @property
    def is_other(self) -> bool:
        return self.count is None

    @property
    def numeric(self) -> int:
        return 0 if self.is_other else self.count

    @classmethod
    def parse(cls, text) -> 'MinInspections':
        label = str(text).strip()
        if label.upper() in cls.OTHER_LABELS:
            return cls()
        try:
            number = float(label)
        except ValueError:
            raise FeatureError(f"Unrecognized minimum inspections value {text!r}") from None
        if not number.is_integer() or number < 0:
            raise FeatureError(f"Minimum inspections must be a non-negative integer, got {text!r}")
        return cls(int(number))


class FeatureEngineer:
    """
    Creates the derived fields used by the aggregations and the models.

    Derivation is row-wise and stateless: the input frame is never
    modified and running it twice on the same input gives the same output.

    Example:
        fe = FeatureEngineer()
        df_features = fe.create_all_features(df_clean)
    """

    def create_all_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Master function to create all derived fields.

        Args:
            df: Cleaned inspection DataFrame

        Returns:
            Copy of the input with derived columns added
        """
        logger.info("Starting feature derivation...")
        df = df.copy()

        logger.info("Creating minimum inspection features...")
        df = self._create_min_inspection_features(df)

        logger.info("Creating severity features...")
        df = self._create_severity_features(df)

        logger.info("Creating status features...")
        df = self._create_status_features(df)

        n_derived = sum(len(cols) for cols in self.get_feature_list().values())
        logger.info(f"Feature derivation complete. {n_derived} derived columns, shape: {df.shape}")
        return df

    def _create_min_inspection_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Numeric required-inspections field; missing values stay missing."""
        parsed = self._parse_column(df, 'min_inspections', MinInspections.parse, skip_missing=True)
        df['min_inspections_numeric'] = parsed.map(
            lambda v: float(v.numeric) if isinstance(v, MinInspections) else np.nan
        ).astype(float)
        return df

    def _create_severity_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Ordinal severity score and one flag per severity level."""
        severity = self._parse_column(df, 'severity', Severity.from_text)

        df['severity_value'] = severity.map(lambda s: s.value).astype(int)
        for level in Severity:
            df[level.flag_column] = severity.map(lambda s, level=level: int(s is level)).astype(int)

        counts = df['severity_value'].value_counts().sort_index().to_dict()
        logger.info(f"Severity value distribution: {counts}")
        return df

    def _create_status_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Pass/fail indicators from the establishment status."""
        status = self._parse_column(df, 'establishment_status', EstablishmentStatus.from_text)

        df['pass_value'] = status.map(lambda s: s.pass_value).astype(int)
        df['fail_value'] = status.map(lambda s: s.fail_value).astype(int)

        if len(df):
            logger.info(f"Pass rate: {df['pass_value'].mean():.1%}, "
                        f"conditional pass rate: {df['fail_value'].mean():.1%}")
        return df

    @staticmethod
    def _parse_column(
        df: pd.DataFrame,
        column: str,
        parser: Callable,
        skip_missing: bool = False
    ) -> pd.Series:
        """
        Parse each distinct value of a column once and map the results back.

        Raises SchemaError when the column is absent and FeatureError naming
        the first row holding a value the parser rejects.
        """
        if column not in df.columns:
            raise SchemaError([column])

        values = df[column]
        missing = values.isna()

        parsed = {}
        for raw in values[~missing].unique():
            try:
                parsed[raw] = parser(raw)
            except FeatureError as e:
                row = values.index[(values == raw).to_numpy()][0]
                raise FeatureError(str(e), row=row, column=column, value=raw) from e

        if missing.any() and not skip_missing:
            try:
                missing_value = parser(None)
            except FeatureError as e:
                row = values.index[missing.to_numpy()][0]
                raise FeatureError(str(e), row=row, column=column, value=None) from e
        else:
            missing_value = None

        result = values.map(parsed).astype(object)
        result[missing] = missing_value
        return result

    def get_feature_list(self) -> dict:
        """
        Return lists of derived features by category for documentation.
        """
        return {
            'severity': ['severity_value'] + [level.flag_column for level in Severity],
            'status': ['pass_value', 'fail_value'],
            'inspection_requirements': ['min_inspections_numeric'],
        }
