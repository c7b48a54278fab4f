"""
Shared test fixtures.

FakeConnection is an in-memory stand-in for a mysql.connector connection. It
understands the statements issued by LayeredTempTable and OverlayService and
raises real mysql.connector errors with the server's error numbers.
"""

import re

import pytest
from mysql.connector import errors

CREATE_RE = re.compile(r'^CREATE TEMPORARY TABLE (\S+) LIKE (\S+)$')
ALTER_RE = re.compile(r'^ALTER TABLE (\S+) ADD COLUMN (\S+) VARCHAR\((\d+)\) NOT NULL$')
COPY_RE = re.compile(r"^(INSERT|REPLACE) INTO (\S+) SELECT (\S+)\.\*, '([^']*)' FROM (\S+)$")
DROP_RE = re.compile(r'^DROP TEMPORARY TABLE (\S+)$')
SELECT_ALL_RE = re.compile(r'^SELECT \* FROM (\S+)$')
GROUP_RE = re.compile(r'^SELECT (\S+), COUNT\(\*\) AS row_count FROM (\S+) GROUP BY (\S+)$')


class FakeTable:
    def __init__(self, columns, primary_key, temporary=False):
        self.columns = list(columns)
        self.primary_key = list(primary_key)
        self.temporary = temporary
        self.widths = {}
        self.rows = {}

    def key(self, row):
        return tuple(row[c] for c in self.primary_key)

    def ordered_rows(self):
        return [self.rows[k] for k in sorted(self.rows)]


class FakeCursor:
    def __init__(self, connection, dictionary=False):
        self.connection = connection
        self.dictionary = dictionary
        self.closed = False
        self._result = []

    def execute(self, sql, params=None):
        self._result = self.connection.run(sql)

    def fetchall(self):
        result, self._result = self._result, []
        if self.dictionary:
            return result
        return [tuple(row.values()) for row in result]

    def fetchone(self):
        rows = self.fetchall()
        return rows[0] if rows else None

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.tables = {}
        self.statements = []
        self.failures = []
        self.cursors = []
        self.connected = True

    # Test helpers

    def add_table(self, name, columns, primary_key, rows=()):
        table = FakeTable(columns, primary_key)
        for row in rows:
            table.rows[table.key(row)] = dict(row)
        self.tables[name] = table
        return table

    def fail_on(self, prefix, errno=1064, msg="Simulated failure"):
        """Make every statement starting with ``prefix`` raise."""
        self.failures.append((prefix, errno, msg))

    def rows(self, name):
        return self.tables[name].ordered_rows()

    # mysql.connector connection API

    def cursor(self, dictionary=False):
        cursor = FakeCursor(self, dictionary=dictionary)
        self.cursors.append(cursor)
        return cursor

    def is_connected(self):
        return self.connected

    def close(self):
        self.connected = False

    # Statement handling

    def run(self, sql):
        self.statements.append(sql)
        for prefix, errno, msg in self.failures:
            if sql.startswith(prefix):
                raise errors.ProgrammingError(msg=msg, errno=errno, sqlstate='42000')

        for pattern, handler in (
            (CREATE_RE, self._create),
            (ALTER_RE, self._alter),
            (COPY_RE, self._copy),
            (DROP_RE, self._drop),
            (SELECT_ALL_RE, self._select_all),
            (GROUP_RE, self._group),
        ):
            match = pattern.match(sql)
            if match:
                return handler(*match.groups()) or []

        raise errors.ProgrammingError(
            msg="You have an error in your SQL syntax", errno=1064, sqlstate='42000'
        )

    def _table(self, name):
        if name not in self.tables:
            raise errors.ProgrammingError(
                msg=f"Table '{name}' doesn't exist", errno=1146, sqlstate='42S02'
            )
        return self.tables[name]

    def _create(self, name, like):
        source = self._table(like)
        if name in self.tables:
            raise errors.ProgrammingError(
                msg=f"Table '{name}' already exists", errno=1050, sqlstate='42S01'
            )
        self.tables[name] = FakeTable(source.columns, source.primary_key, temporary=True)

    def _alter(self, name, column, width):
        table = self._table(name)
        if column in table.columns:
            raise errors.ProgrammingError(
                msg=f"Duplicate column name '{column}'", errno=1060, sqlstate='42S21'
            )
        table.columns.append(column)
        table.widths[column] = int(width)

    def _copy(self, act, target_name, star_table, literal, source_name):
        target = self._table(target_name)
        source = self._table(source_name)
        if star_table != source_name:
            raise errors.ProgrammingError(
                msg=f"Unknown table '{star_table}'", errno=1051, sqlstate='42S02'
            )
        if len(source.columns) + 1 != len(target.columns):
            raise errors.DataError(
                msg="Column count doesn't match value count at row 1", errno=1136, sqlstate='21S01'
            )
        origin_column = target.columns[-1]
        if len(literal) > target.widths.get(origin_column, len(literal)):
            raise errors.DataError(
                msg=f"Data too long for column '{origin_column}' at row 1", errno=1406, sqlstate='22001'
            )

        for row in source.ordered_rows():
            values = list(row.values()) + [literal]
            new_row = dict(zip(target.columns, values))
            key = target.key(new_row)
            if key in target.rows and act == 'INSERT':
                raise errors.IntegrityError(
                    msg=f"Duplicate entry '{key}' for key 'PRIMARY'", errno=1062, sqlstate='23000'
                )
            target.rows[key] = new_row

    def _drop(self, name):
        table = self.tables.get(name)
        if table is None or not table.temporary:
            raise errors.ProgrammingError(
                msg=f"Unknown table '{name}'", errno=1051, sqlstate='42S02'
            )
        del self.tables[name]

    def _select_all(self, name):
        return [dict(row) for row in self._table(name).ordered_rows()]

    def _group(self, column, name, group_column):
        counts = {}
        for row in self._table(name).ordered_rows():
            counts[row[column]] = counts.get(row[column], 0) + 1
        return [{column: origin, 'row_count': count} for origin, count in counts.items()]


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def layered_connection(connection):
    """Three tables sharing primary key id: A < B < C."""
    connection.add_table('A', ['id', 'v'], ['id'], [{'id': 1, 'v': 'a'}])
    connection.add_table('B', ['id', 'v'], ['id'], [{'id': 1, 'v': 'b'}, {'id': 2, 'v': 'x'}])
    connection.add_table('C', ['id', 'v'], ['id'], [{'id': 2, 'v': 'y'}])
    return connection


@pytest.fixture
def item_connection(connection):
    """Base item table plus an override table."""
    columns = ['id', 'name', 'price']
    connection.add_table('item_db', columns, ['id'], [
        {'id': 501, 'name': 'Red Potion', 'price': 50},
        {'id': 502, 'name': 'Orange Potion', 'price': 200},
        {'id': 503, 'name': 'Yellow Potion', 'price': 550},
    ])
    connection.add_table('item_db2', columns, ['id'], [
        {'id': 502, 'name': 'Orange Potion', 'price': 150},
        {'id': 30000, 'name': 'Custom Item', 'price': 1},
    ])
    connection.add_table('mob_db', ['id', 'name'], ['id'], [{'id': 1002, 'name': 'Poring'}])
    connection.add_table('mob_db2', ['id', 'name'], ['id'], [])
    return connection
