"""
Shared fixtures: small synthetic Dinesafe tables.
"""

import matplotlib
import numpy as np
import pandas as pd
import pytest

matplotlib.use("Agg")


def make_row(**overrides):
    """One cleaned inspection row with sensible defaults."""
    row = {
        'establishment_id': 1001,
        'inspection_id': 5001,
        'establishment_name': 'Queen St Deli',
        'establishment_type': 'Restaurant',
        'establishment_address': '100 Queen St W',
        'establishment_status': 'Pass',
        'min_inspections': '2',
        'inspection_date': pd.Timestamp('2023-05-01'),
        'severity': '',
        'latitude': 43.65,
        'longitude': -79.38,
    }
    row.update(overrides)
    return row


def make_frame(rows):
    return pd.DataFrame([make_row(**r) for r in rows])


@pytest.fixture
def sample_inspections():
    """A handful of rows covering every severity and status."""
    return make_frame([
        {'severity': '', 'establishment_status': 'Pass', 'min_inspections': '1'},
        {'severity': 'NA - Not Applicable', 'establishment_status': 'Pass', 'min_inspections': '2'},
        {'severity': 'M - Minor', 'establishment_status': 'Conditional Pass', 'min_inspections': '3'},
        {'severity': 'S - Significant', 'establishment_status': 'Conditional Pass', 'min_inspections': 'O'},
        {'severity': 'C - Crucial', 'establishment_status': 'Closed', 'min_inspections': '2'},
    ])


@pytest.fixture
def modeling_inspections():
    """
    Sixty single-row inspections across three establishment types.

    Even inspections have no infraction, odd ones a minor infraction, so
    both label classes are always present.
    """
    rng = np.random.default_rng(0)
    types = ['Restaurant', 'Food Cart', 'Bakery']
    rows = []
    for i in range(60):
        rows.append({
            'establishment_id': 1000 + i % 20,
            'inspection_id': 5000 + i,
            'establishment_name': f'Establishment {i % 20}',
            'establishment_type': types[i % 3],
            'establishment_address': f'{i % 20} King St',
            'establishment_status': 'Pass' if i % 2 == 0 else 'Conditional Pass',
            'min_inspections': str(1 + i % 3),
            'inspection_date': pd.Timestamp('2022-01-01') + pd.Timedelta(days=7 * i),
            'severity': '' if i % 2 == 0 else 'M - Minor',
            'latitude': 43.6 + rng.uniform(0, 0.2),
            'longitude': -79.5 + rng.uniform(0, 0.3),
        })
    return make_frame(rows)
