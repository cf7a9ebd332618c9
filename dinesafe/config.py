"""
Configuration
=============
Project paths, dataset location, column contract and model defaults.
"""

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_RAW = PROJECT_ROOT / "data" / "raw"

# Toronto Open Data (CKAN) identifiers
TORONTO_CKAN_BASE_URL = "https://ckan0.cf.opendata.inter.prod-toronto.ca"
DINESAFE_PACKAGE_ID = "dinesafe"
REQUEST_TIMEOUT = 60

# Header contract of the Dinesafe CSV, mapped to snake_case names
COLUMN_MAP = {
    '_id': 'row_id',
    'Rec#': 'rec_num',
    'Establishment ID': 'establishment_id',
    'Inspection ID': 'inspection_id',
    'Establishment Name': 'establishment_name',
    'Establishment Type': 'establishment_type',
    'Establishment Address': 'establishment_address',
    'Establishment Status': 'establishment_status',
    'Min. Inspections Per Year': 'min_inspections',
    'Infraction Details': 'infraction_details',
    'Inspection Date': 'inspection_date',
    'Severity': 'severity',
    'Action': 'action',
    'Outcome': 'outcome',
    'Amount Fined': 'amount_fined',
    'Latitude': 'latitude',
    'Longitude': 'longitude',
}

# Columns every report needs; the rest of the header is optional
REQUIRED_COLUMNS = [
    'Establishment ID', 'Inspection ID', 'Establishment Name',
    'Establishment Type', 'Establishment Address', 'Establishment Status',
    'Min. Inspections Per Year', 'Inspection Date', 'Severity',
    'Latitude', 'Longitude',
]

NUMERIC_COLUMNS = ['establishment_id', 'inspection_id', 'amount_fined', 'latitude', 'longitude']
DATE_COLUMNS = ['inspection_date']

# Model defaults
RANDOM_STATE = 42
N_ESTIMATORS = 500
MIN_TRAINING_ROWS = 10
PERMUTATION_REPEATS = 5
TOP_N_SEVERITY = 10
