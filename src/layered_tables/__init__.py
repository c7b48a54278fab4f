"""
Layered temporary tables for MySQL.

Merges an ordered list of source tables into one session-scoped temporary
table, later tables overriding earlier ones on primary key, with each row's
table of origin recorded in ``origin_table``.
"""

from .database import LayeredTempTable
from .errors import (
    ConfigurationError,
    CreationError,
    DriverErrorInfo,
    LayeredTableError,
    SchemaError,
    TableImportError
)
from .models import DatabaseConfig, OverlayDefinition
from .services import OverlayService, OverlaySummary

__version__ = "0.1.0"

__all__ = [
    'LayeredTempTable',
    'LayeredTableError',
    'ConfigurationError',
    'CreationError',
    'SchemaError',
    'TableImportError',
    'DriverErrorInfo',
    'DatabaseConfig',
    'OverlayDefinition',
    'OverlayService',
    'OverlaySummary'
]
