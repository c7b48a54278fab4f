"""
Layered temporary tables for MySQL.

Creates a session-scoped temporary table and populates it from an ordered list
of source tables sharing one schema. Rows from later tables replace rows from
earlier tables with the same primary key, and every row records the table it
was last copied from in an ``origin_table`` column.

Typical use is merging a base table with its override tables, e.g.
``item_db`` + ``item_db2`` or ``mob_db`` + ``mob_db2``.

Table names are interpolated into SQL as-is and must be trusted identifiers.
Validate anything externally supplied before it gets here (see
``layered_tables.models.overlay``).
"""

import logging
from typing import Optional, Sequence

from mysql.connector import Error

from ..errors import (
    ConfigurationError, CreationError, DriverErrorInfo, SchemaError, TableImportError
)

logger = logging.getLogger(__name__)

ORIGIN_COLUMN = "origin_table"

# MySQL accepts VARCHAR(0), but a zero-width origin column cannot hold a value.
MIN_ORIGIN_WIDTH = 1


class LayeredTempTable:
    """
    Temporary table holding the layered union of several source tables.

    The table is built in the constructor. Use it as a context manager so the
    temporary table is dropped when the block exits::

        with LayeredTempTable(conn, 'items', ['item_db', 'item_db2']) as table:
            cursor.execute(f"SELECT * FROM {table.table_name}")

    The connection is borrowed: it is never committed or closed here.
    """

    def __init__(self, connection, table_name: str, source_tables: Sequence[str]):
        """
        Create and populate the temporary table.

        Args:
            connection: Open MySQL connection (mysql.connector)
            table_name: Name of the temporary table to create
            source_tables: Tables to import, lowest precedence first

        Raises:
            ConfigurationError: No source tables were given, or a bare string was
                given instead of a list of names
            CreationError: The temporary table could not be created
            SchemaError: The origin_table column could not be added
            TableImportError: Rows from a source table could not be imported
        """
        self.connection = connection
        self.table_name = table_name
        self.last_drop_error: Optional[DriverErrorInfo] = None
        self._dropped = False

        if isinstance(source_tables, str):
            message = (
                f"Source tables for the temporary table '{table_name}' must be a list of "
                f"table names, not the string '{source_tables}'"
            )
            logger.error(message)
            raise ConfigurationError(message, table_name=table_name)

        self.source_tables = tuple(source_tables)
        if not self.source_tables:
            message = f"One or more tables must be specified to import into the temporary table '{table_name}'"
            logger.error(message)
            raise ConfigurationError(message, table_name=table_name)

        self.origin_width = self._find_varchar_length()

        first_table = self.source_tables[0]
        self._create(first_table)

        # Rows imported from the following tables overwrite these rows.
        self._import(first_table, overwrite=False)
        for table in self.source_tables[1:]:
            self._import(table)

        logger.info(
            f"Populated temporary table {self.table_name} from {len(self.source_tables)} "
            f"source table(s): {', '.join(self.source_tables)}"
        )

    def __enter__(self) -> "LayeredTempTable":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if self._dropped:
            return
        if not self.drop():
            logger.warning(f"Temporary table {self.table_name} was not dropped: {self.last_drop_error}")

    @property
    def dropped(self) -> bool:
        return self._dropped

    def _execute(self, sql: str) -> None:
        """Execute a single statement on the borrowed connection."""
        logger.debug(f"Executing: {sql}")
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql)
        finally:
            cursor.close()

    def _create(self, first_table: str) -> None:
        """Create the temporary table and add the origin_table column."""
        sql = f"CREATE TEMPORARY TABLE {self.table_name} LIKE {first_table}"
        try:
            self._execute(sql)
        except Error as e:
            message = f"Failed to create temporary table '{self.table_name}'."
            logger.error(f"{message} {e}")
            raise CreationError(
                message, table_name=self.table_name, driver_error=DriverErrorInfo.from_error(e)
            ) from e

        sql = (
            f"ALTER TABLE {self.table_name} "
            f"ADD COLUMN {ORIGIN_COLUMN} VARCHAR({self.origin_width}) NOT NULL"
        )
        try:
            self._execute(sql)
        except Error as e:
            # Drop first; the add-column failure is what gets reported.
            self.drop()

            message = f"Failed to add `{ORIGIN_COLUMN}` column to '{self.table_name}'."
            logger.error(f"{message} {e}")
            raise SchemaError(
                message, table_name=self.table_name, driver_error=DriverErrorInfo.from_error(e)
            ) from e

        logger.info(f"Created temporary table {self.table_name} like {first_table}")

    def _import(self, table: str, overwrite: bool = True) -> None:
        """
        Copy every row of ``table`` into the temporary table.

        With ``overwrite`` rows sharing a primary key with an existing row
        replace it wholesale, otherwise a plain INSERT is used.
        """
        act = "REPLACE" if overwrite else "INSERT"
        sql = f"{act} INTO {self.table_name} SELECT {table}.*, '{table}' FROM {table}"
        try:
            self._execute(sql)
        except Error as e:
            if overwrite:
                message = f"Failed to import/replace rows from table '{table}'"
            else:
                message = f"Failed to import rows from initial table '{table}'"
            logger.error(f"{message}: {e}")
            raise TableImportError(
                message,
                table_name=self.table_name,
                source_table=table,
                driver_error=DriverErrorInfo.from_error(e),
                temp_table=self
            ) from e

        logger.debug(f"Imported rows from {table} into {self.table_name} ({act})")

    def _find_varchar_length(self) -> int:
        """Length of the longest source table name, used as the origin_table width."""
        return max([MIN_ORIGIN_WIDTH] + [len(table) for table in self.source_tables])

    def drop(self) -> bool:
        """
        Drop the temporary table.

        Returns:
            True if the table was dropped, False if the statement failed or the
            table was already dropped. Failures are kept on ``last_drop_error``
            rather than raised.
        """
        if self._dropped:
            logger.debug(f"Temporary table {self.table_name} already dropped")
            return False

        try:
            self._execute(f"DROP TEMPORARY TABLE {self.table_name}")
        except Error as e:
            self.last_drop_error = DriverErrorInfo.from_error(e)
            logger.warning(f"Failed to drop temporary table {self.table_name}: {e}")
            return False
        except Exception as e:
            self.last_drop_error = DriverErrorInfo(errno=None, sqlstate=None, message=str(e))
            logger.warning(f"Failed to drop temporary table {self.table_name}: {e}")
            return False

        self._dropped = True
        self.last_drop_error = None
        logger.info(f"Dropped temporary table {self.table_name}")
        return True

    def __repr__(self) -> str:
        return f"LayeredTempTable(table_name={self.table_name!r}, source_tables={list(self.source_tables)!r})"
