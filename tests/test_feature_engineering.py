"""
Unit tests for derived inspection fields
"""

import numpy as np
import pandas as pd
import pytest

from dinesafe.exceptions import FeatureError, SchemaError
from dinesafe.feature_engineering import EstablishmentStatus, FeatureEngineer, MinInspections, Severity

from .conftest import make_frame

FLAG_COLUMNS = [level.flag_column for level in Severity]


class TestSeverityFeatures:
    """Severity score and one-hot flags"""

    def test_values_follow_harm_order(self, sample_inspections):
        df = FeatureEngineer().create_all_features(sample_inspections)

        assert df['severity_value'].tolist() == [0, 1, 2, 3, 4]

    def test_exactly_one_flag_per_row(self, sample_inspections):
        df = FeatureEngineer().create_all_features(sample_inspections)

        assert set(df['severity_value']) <= {0, 1, 2, 3, 4}
        assert (df[FLAG_COLUMNS].sum(axis=1) == 1).all()
        assert df.loc[4, 'severity_crucial'] == 1
        assert df.loc[0, 'severity_blank'] == 1

    def test_missing_severity_is_blank(self):
        df = make_frame([{'severity': np.nan}])

        result = FeatureEngineer().create_all_features(df)

        assert result.loc[0, 'severity_value'] == 0
        assert result.loc[0, 'severity_blank'] == 1

    def test_unknown_severity_raises_with_row(self):
        df = make_frame([{'severity': 'M - Minor'}, {'severity': 'X - Extreme'}])

        with pytest.raises(FeatureError) as exc_info:
            FeatureEngineer().create_all_features(df)

        assert exc_info.value.row == 1
        assert exc_info.value.column == 'severity'
        assert exc_info.value.value == 'X - Extreme'

    def test_from_text_rejects_unknown(self):
        with pytest.raises(FeatureError):
            Severity.from_text('Minor')


class TestStatusFeatures:
    """Pass and fail indicators"""

    def test_pass_and_fail_never_both_set(self, sample_inspections):
        df = FeatureEngineer().create_all_features(sample_inspections)

        assert not ((df['pass_value'] == 1) & (df['fail_value'] == 1)).any()

    def test_status_mapping(self, sample_inspections):
        df = FeatureEngineer().create_all_features(sample_inspections)

        assert df['pass_value'].tolist() == [1, 1, 0, 0, 0]
        assert df['fail_value'].tolist() == [0, 0, 1, 1, 0]

    def test_closed_is_neither_pass_nor_fail(self):
        assert EstablishmentStatus.CLOSED.pass_value == 0
        assert EstablishmentStatus.CLOSED.fail_value == 0

    def test_unknown_status_raises(self):
        df = make_frame([{'establishment_status': 'Out of Business'}])

        with pytest.raises(FeatureError) as exc_info:
            FeatureEngineer().create_all_features(df)

        assert exc_info.value.column == 'establishment_status'

    def test_missing_status_raises(self):
        df = make_frame([{}, {'establishment_status': np.nan}])

        with pytest.raises(FeatureError) as exc_info:
            FeatureEngineer().create_all_features(df)

        assert exc_info.value.row == 1


class TestMinInspections:
    """Minimum inspections per year"""

    def test_other_is_zero(self):
        assert MinInspections.parse('O').numeric == 0
        assert MinInspections.parse('Other').is_other

    def test_number_is_parsed(self):
        parsed = MinInspections.parse('2')

        assert parsed.numeric == 2
        assert not parsed.is_other

    def test_invalid_value_raises(self):
        with pytest.raises(FeatureError):
            MinInspections.parse('twice')

    def test_numeric_column(self, sample_inspections):
        df = FeatureEngineer().create_all_features(sample_inspections)

        assert df['min_inspections_numeric'].tolist() == [1.0, 2.0, 3.0, 0.0, 2.0]

    def test_missing_value_stays_missing(self):
        df = make_frame([{'min_inspections': np.nan}, {'min_inspections': '3'}])

        result = FeatureEngineer().create_all_features(df)

        assert np.isnan(result.loc[0, 'min_inspections_numeric'])
        assert result.loc[1, 'min_inspections_numeric'] == 3.0


class TestDeterminism:
    """Derivation has no hidden state"""

    def test_running_twice_gives_identical_output(self, sample_inspections):
        fe = FeatureEngineer()

        first = fe.create_all_features(sample_inspections)
        second = fe.create_all_features(sample_inspections)

        pd.testing.assert_frame_equal(first, second)

    def test_input_is_not_modified(self, sample_inspections):
        before = sample_inspections.copy()

        FeatureEngineer().create_all_features(sample_inspections)

        pd.testing.assert_frame_equal(sample_inspections, before)


class TestRequiredColumns:
    """Columns the derivation cannot run without"""

    @pytest.mark.parametrize('column', ['severity', 'establishment_status', 'min_inspections'])
    def test_missing_column_raises_schema_error(self, sample_inspections, column):
        with pytest.raises(SchemaError) as exc_info:
            FeatureEngineer().create_all_features(sample_inspections.drop(columns=column))

        assert exc_info.value.missing_columns == [column]

    def test_feature_list_matches_derived_columns(self, sample_inspections):
        fe = FeatureEngineer()

        df = fe.create_all_features(sample_inspections)

        derived = [col for cols in fe.get_feature_list().values() for col in cols]
        assert len(derived) == 9
        assert set(derived) <= set(df.columns)
        assert set(derived).isdisjoint(sample_inspections.columns)
