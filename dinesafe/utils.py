"""
Utility Functions
=================
Helper functions used across the project.

Author: [Your Name]
Date: [Oct 18, 2026]
"""

import logging
import time

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def format_large_number(number: int) -> str:
    """
    Format large numbers with commas.

    Args:
        number: Integer to format

    Returns:
        Formatted string (e.g., "1,234,567")
    """
    return f"{number:,}"


def format_statistic(value: float, digits: int = 3) -> str:
    """Format a summary statistic, spelling out undefined values."""
    if value is None or np.isnan(value):
        return "undefined"
    return f"{value:.{digits}f}"


def log_dataframe_info(df: pd.DataFrame, name: str = "DataFrame") -> None:
    """
    Log summary information about a DataFrame.

    Args:
        df: DataFrame to summarize
        name: Name to use in logging
    """
    logger.info(f"\n{name} Summary:")
    logger.info(f"  Shape: {df.shape}")
    logger.info(f"  Memory: {df.memory_usage(deep=True).sum() / 1024**2:.2f} MB")
    logger.info(f"  Missing values: {df.isnull().sum().sum():,}")
    logger.info(f"  Columns: {list(df.columns)}")


class Timer:
    """
    Context manager for timing code blocks.

    Example:
        with Timer("Data loading"):
            df = load_data()
    """

    def __init__(self, name: str = "Operation"):
        self.name = name
        self.start_time = None
        self.elapsed = None

    def __enter__(self):
        self.start_time = time.time()
        logger.info(f"Starting: {self.name}")
        return self

    def __exit__(self, *args):
        self.elapsed = time.time() - self.start_time
        logger.info(f"Completed: {self.name} ({self.elapsed:.2f}s)")
