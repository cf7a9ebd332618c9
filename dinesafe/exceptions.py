"""
Exceptions
==========
Errors raised by the Dinesafe pipeline.

Every error is fatal to a report run: nothing is retried and no partial
report is produced.
"""

from typing import Any, Optional


class DinesafeError(Exception):
    """Base class for all pipeline errors."""


class DataSourceError(DinesafeError):
    """The inspection source is unreachable or cannot be parsed as CSV."""


class SchemaError(DinesafeError):
    """Required columns are missing from the loaded table."""

    def __init__(self, missing_columns):
        self.missing_columns = list(missing_columns)
        super().__init__(f"Missing required columns: {self.missing_columns}")


class FeatureError(DinesafeError):
    """A value falls outside one of the closed enumerations."""

    def __init__(
        self,
        message: str,
        row: Optional[Any] = None,
        column: Optional[str] = None,
        value: Any = None
    ):
        self.row = row
        self.column = column
        self.value = value
        if row is not None or column is not None:
            message = f"{message} (row={row!r}, column={column!r}, value={value!r})"
        super().__init__(message)


class ModelTrainingError(DinesafeError):
    """Training data is too small or its label has a single class."""
