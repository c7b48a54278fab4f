"""
Overlay service for querying layered temporary tables.

Opens a MySQL connection, builds the temporary table for a registered overlay,
runs the read against it and drops the table again before the connection is
closed.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import Error

from ..database.temporary_table import ORIGIN_COLUMN, LayeredTempTable
from ..errors import TableImportError
from ..models import DEFAULT_OVERLAYS, DatabaseConfig, OverlayDefinition, get_overlay_by_name

logger = logging.getLogger(__name__)


@dataclass
class OverlaySummary:
    """Row counts of a layered table, by origin table."""
    overlay_name: str
    table_name: str
    source_tables: List[str]
    total_rows: int = 0
    rows_by_origin: Dict[str, int] = field(default_factory=dict)

    @property
    def overridden_tables(self) -> List[str]:
        """Source tables after the first that still supply at least one row."""
        return [t for t in self.source_tables[1:] if self.rows_by_origin.get(t, 0) > 0]


class OverlayService:
    """
    Builds registered overlays and reads from them.

    Each overlay is a temporary table, so it only exists on the connection
    that created it. Every public read opens its own connection.
    """

    def __init__(self, db_config: DatabaseConfig,
                 overlays: Optional[Dict[str, OverlayDefinition]] = None):
        """
        Initialize overlay service.

        Args:
            db_config: Database connection configuration
            overlays: Overlay registry, DEFAULT_OVERLAYS if omitted
        """
        self.db_config = db_config
        self.overlays = dict(DEFAULT_OVERLAYS if overlays is None else overlays)

    def register(self, overlay: OverlayDefinition) -> None:
        """Add or replace an overlay definition."""
        self.overlays[overlay.name] = overlay
        logger.info(f"Registered overlay {overlay.name}: {', '.join(overlay.source_tables)}")

    @contextmanager
    def get_db_connection(self):
        """Context manager for database connections."""
        connection = None
        try:
            connection = mysql.connector.connect(**self.db_config.as_connect_kwargs())
            yield connection
        except Error as e:
            logger.error(f"Database connection error: {e}")
            raise
        finally:
            if connection and connection.is_connected():
                connection.close()

    @contextmanager
    def open_overlay(self, connection, overlay_name: str):
        """
        Build an overlay on a borrowed connection and drop it on exit.

        Args:
            connection: Open MySQL connection
            overlay_name: Registered overlay name

        Yields:
            LayeredTempTable ready to query on ``connection``

        A temporary table left behind by a failed import is dropped before the
        error propagates, so the overlay can be opened again on the same
        connection.
        """
        overlay = get_overlay_by_name(overlay_name, self.overlays)
        try:
            table = LayeredTempTable(connection, overlay.table_name, overlay.source_tables)
        except TableImportError as e:
            if e.temp_table is not None:
                e.temp_table.drop()
            raise

        with table:
            yield table

    def fetch_rows(self, overlay_name: str) -> List[Dict[str, Any]]:
        """
        Retrieve every row of an overlay.

        Args:
            overlay_name: Registered overlay name

        Returns:
            List of row dictionaries, each including origin_table
        """
        with self.get_db_connection() as conn:
            with self.open_overlay(conn, overlay_name) as table:
                cursor = conn.cursor(dictionary=True)
                try:
                    cursor.execute(f"SELECT * FROM {table.table_name}")
                    rows = cursor.fetchall()
                finally:
                    cursor.close()

        logger.info(f"Fetched {len(rows)} rows from overlay {overlay_name}")
        return rows

    def summarize_origins(self, overlay_name: str) -> OverlaySummary:
        """
        Count overlay rows by the source table that supplied them.

        Args:
            overlay_name: Registered overlay name

        Returns:
            OverlaySummary with per-origin row counts
        """
        overlay = get_overlay_by_name(overlay_name, self.overlays)
        summary = OverlaySummary(
            overlay_name=overlay.name,
            table_name=overlay.table_name,
            source_tables=list(overlay.source_tables)
        )

        with self.get_db_connection() as conn:
            with self.open_overlay(conn, overlay_name) as table:
                cursor = conn.cursor()
                try:
                    cursor.execute(
                        f"SELECT {ORIGIN_COLUMN}, COUNT(*) AS row_count "
                        f"FROM {table.table_name} GROUP BY {ORIGIN_COLUMN}"
                    )
                    for origin, count in cursor.fetchall():
                        summary.rows_by_origin[origin] = int(count)
                finally:
                    cursor.close()

        summary.total_rows = sum(summary.rows_by_origin.values())
        logger.info(
            f"Overlay {overlay_name}: {summary.total_rows} rows, "
            f"{len(summary.overridden_tables)} override table(s) in effect"
        )
        return summary
