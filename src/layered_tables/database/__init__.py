"""
Database module for layered temporary tables.

This module provides the temporary table that merges several source tables,
later tables overriding earlier ones.
"""

from .temporary_table import LayeredTempTable, ORIGIN_COLUMN, MIN_ORIGIN_WIDTH

__all__ = [
    'LayeredTempTable',
    'ORIGIN_COLUMN',
    'MIN_ORIGIN_WIDTH'
]
