"""
Data Loader Module
==================
Handles data ingestion of the Toronto Dinesafe inspection table from the
Toronto Open Data portal, a direct CSV URL, or a local CSV file.
Validates the header contract and coerces column types.

Author: [Your Name]
Date: [Oct 18, 2026]
"""

import io
import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd
import requests

from .config import (
    COLUMN_MAP,
    DATA_RAW,
    DATE_COLUMNS,
    DINESAFE_PACKAGE_ID,
    NUMERIC_COLUMNS,
    REQUEST_TIMEOUT,
    REQUIRED_COLUMNS,
    TORONTO_CKAN_BASE_URL,
)
from .exceptions import DataSourceError, SchemaError
from .utils import log_dataframe_info

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class DinesafeDataLoader:
    """
    Loads the Dinesafe inspection table and performs type coercion.

    Can load from:
    - Local CSV file
    - A CSV download URL
    - The Toronto Open Data CKAN API (latest published resource)

    Example:
        loader = DinesafeDataLoader()
        df = loader.load("data/raw/dinesafe.csv")
    """

    def __init__(self, timeout: int = REQUEST_TIMEOUT, ckan_base_url: str = TORONTO_CKAN_BASE_URL):
        """
        Initialize the data loader.

        Args:
            timeout: Seconds to wait for any HTTP request
            ckan_base_url: Root of the CKAN instance used by load_from_portal
        """
        self.timeout = timeout
        self.ckan_base_url = ckan_base_url.rstrip('/')

    def load(self, source: Union[str, Path]) -> pd.DataFrame:
        """
        Load, validate and type-coerce the inspection table.

        Args:
            source: http(s) URL or local path of the CSV

        Returns:
            Cleaned DataFrame with snake_case columns
        """
        source = str(source)
        if source.startswith(('http://', 'https://')):
            df = self.load_from_url(source)
        else:
            df = self.load_from_csv(source)

        self.validate_schema(df)
        return self.clean_data(df)

    def load_from_csv(self, filepath: Union[str, Path]) -> pd.DataFrame:
        """
        Load raw data from a local CSV file.

        Args:
            filepath: Path to the CSV file

        Returns:
            Raw DataFrame, every column read as text
        """
        logger.info(f"Loading data from {filepath}")

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                df = self._read_csv(f)
        except OSError as e:
            raise DataSourceError(f"Could not read {filepath}: {e}") from e

        logger.info(f"Loaded {len(df):,} rows and {len(df.columns)} columns")
        return df

    def load_from_url(self, url: str) -> pd.DataFrame:
        """
        Download a CSV in a single attempt.

        Args:
            url: Direct download URL of the CSV

        Returns:
            Raw DataFrame, every column read as text
        """
        logger.info(f"Fetching data from {url}")

        try:
            with requests.get(url, timeout=self.timeout) as response:
                response.raise_for_status()
                text = response.text
        except requests.RequestException as e:
            raise DataSourceError(f"Could not fetch {url}: {e}") from e

        df = self._read_csv(io.StringIO(text))
        logger.info(f"Fetched {len(df):,} rows from {url}")
        return df

    def load_from_portal(self, package_id: str = DINESAFE_PACKAGE_ID) -> pd.DataFrame:
        """
        Load the current Dinesafe CSV published on Toronto Open Data.

        Args:
            package_id: CKAN package name

        Returns:
            Cleaned DataFrame
        """
        url = self.resolve_portal_url(package_id)
        return self.load(url)

    def resolve_portal_url(self, package_id: str = DINESAFE_PACKAGE_ID) -> str:
        """Look up the download URL of the first CSV resource of a CKAN package."""
        api_url = f"{self.ckan_base_url}/api/3/action/package_show"
        logger.info(f"Resolving CKAN package '{package_id}'")

        try:
            with requests.get(api_url, params={'id': package_id}, timeout=self.timeout) as response:
                response.raise_for_status()
                package = response.json()
        except (requests.RequestException, ValueError) as e:
            raise DataSourceError(f"Could not resolve package '{package_id}': {e}") from e

        if not package.get('success'):
            raise DataSourceError(f"CKAN returned an error for package '{package_id}'")

        for resource in package.get('result', {}).get('resources', []):
            if str(resource.get('format', '')).upper() == 'CSV' and resource.get('url'):
                return resource['url']

        raise DataSourceError(f"Package '{package_id}' has no CSV resource")

    def _read_csv(self, buffer) -> pd.DataFrame:
        """Parse a CSV buffer, keeping every field as text."""
        try:
            return pd.read_csv(buffer, dtype=str, keep_default_na=False, na_values=[''], low_memory=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise DataSourceError(f"Malformed CSV: {e}") from e

    def validate_schema(self, df: pd.DataFrame) -> None:
        """
        Check that every required header column is present.

        Args:
            df: Raw DataFrame with the original header names

        Raises:
            SchemaError: naming each missing column
        """
        missing_cols = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing_cols:
            raise SchemaError(missing_cols)

    def clean_data(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Rename columns and coerce numeric and date fields.

        No rows are dropped and no values are derived here; blank severities
        become the empty string so they can be matched against the closed set.

        Args:
            df: Raw DataFrame

        Returns:
            Cleaned DataFrame
        """
        df = df.rename(columns=COLUMN_MAP)

        for col in NUMERIC_COLUMNS:
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors='coerce')

        for col in DATE_COLUMNS:
            if col in df.columns:
                df[col] = pd.to_datetime(df[col], errors='coerce')

        text_columns = [
            'establishment_name', 'establishment_type', 'establishment_address',
            'establishment_status', 'min_inspections', 'severity'
        ]
        for col in text_columns:
            if col in df.columns:
                df[col] = df[col].str.strip()

        df['severity'] = df['severity'].fillna('')

        log_dataframe_info(df, "Dinesafe inspections")
        return df

    def get_data_summary(self, df: pd.DataFrame) -> dict:
        """
        Generate a summary of the cleaned dataset.

        Args:
            df: Cleaned DataFrame

        Returns:
            Dictionary with summary statistics
        """
        summary = {
            'total_rows': len(df),
            'total_columns': len(df.columns),
            'unique_establishments': df['establishment_id'].nunique() if 'establishment_id' in df.columns else None,
            'unique_inspections': df['inspection_id'].nunique() if 'inspection_id' in df.columns else None,
            'date_range': None,
            'statuses': None,
            'missing_values': df.isnull().sum().to_dict()
        }

        if 'inspection_date' in df.columns and df['inspection_date'].notna().any():
            summary['date_range'] = {
                'min': str(df['inspection_date'].min()),
                'max': str(df['inspection_date'].max())
            }

        if 'establishment_status' in df.columns:
            summary['statuses'] = df['establishment_status'].value_counts().to_dict()

        return summary


def main(source: Optional[str] = None):
    """Load the dataset and print a short summary."""

    loader = DinesafeDataLoader()

    # Prefer an explicit source, then a local copy, then the portal
    local_file = DATA_RAW / "dinesafe.csv"
    if source:
        df = loader.load(source)
    elif local_file.exists():
        df = loader.load(local_file)
    else:
        df = loader.load_from_portal()

    summary = loader.get_data_summary(df)
    print("\n" + "="*50)
    print("DATA SUMMARY")
    print("="*50)
    print(f"Total Records: {summary['total_rows']:,}")
    print(f"Unique Establishments: {summary['unique_establishments']:,}")
    if summary['date_range']:
        print(f"Date Range: {summary['date_range']['min'][:10]} to {summary['date_range']['max'][:10]}")
    print("\nRecords by Status:")
    for status, count in summary['statuses'].items():
        print(f"  {status}: {count:,}")


if __name__ == "__main__":
    main()
