"""
Exception types raised while building layered temporary tables.

Each failure mode of the build has its own class so callers can dispatch on
the type. Where the failure came from the MySQL driver, the driver's error
number, SQLSTATE and message are kept on ``driver_error``.
"""

from dataclasses import dataclass
from typing import Optional

from mysql.connector import Error


@dataclass
class DriverErrorInfo:
    """Structured error detail reported by the MySQL driver."""
    errno: Optional[int]
    sqlstate: Optional[str]
    message: str

    @classmethod
    def from_error(cls, error: Error) -> "DriverErrorInfo":
        return cls(
            errno=getattr(error, 'errno', None),
            sqlstate=getattr(error, 'sqlstate', None),
            message=getattr(error, 'msg', None) or str(error)
        )

    def __str__(self) -> str:
        return f"{self.errno} ({self.sqlstate}): {self.message}"


class LayeredTableError(Exception):
    """Base class for layered temporary table failures."""

    def __init__(self, message: str, table_name: Optional[str] = None,
                 driver_error: Optional[DriverErrorInfo] = None):
        self.message = message
        self.table_name = table_name
        self.driver_error = driver_error
        if driver_error is not None:
            message = f"{message}\nError info: {driver_error}"
        super().__init__(message)


class ConfigurationError(LayeredTableError):
    """Raised when a layered table is configured incorrectly."""


class CreationError(LayeredTableError):
    """Raised when CREATE TEMPORARY TABLE ... LIKE fails."""


class SchemaError(LayeredTableError):
    """Raised when the origin_table column cannot be added."""


class TableImportError(LayeredTableError):
    """
    Raised when rows from a source table cannot be copied in.

    Rows imported before the failure stay in the temporary table.
    ``temp_table`` is the partly built LayeredTempTable, so the caller can
    drop it before retrying.
    """

    def __init__(self, message: str, table_name: Optional[str] = None,
                 source_table: Optional[str] = None,
                 driver_error: Optional[DriverErrorInfo] = None,
                 temp_table=None):
        self.source_table = source_table
        self.temp_table = temp_table
        super().__init__(message, table_name=table_name, driver_error=driver_error)
