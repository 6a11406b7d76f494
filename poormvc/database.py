"""Database connection wrapper with query log.

:Exceptions: DatabaseError
:Classes:    Database, QueryLog, QueryLogEntry, QueryResult
:Constants:  QUERY_LOG_MAX_SIZE

Any DB-API 2.0 driver could be used, ``sqlite3`` is default. Statements
failures are never raised, they are stored to query log, and method
returns None instead.
"""
from importlib import import_module
from logging import getLogger
from time import perf_counter
from typing import Any, NamedTuple, Optional, Sequence, Union

import sqlite3

from poormvc.config import Config, ConfigError

log = getLogger("poormvc")

QUERY_LOG_MAX_SIZE = 200

Params = Union[Sequence, dict]


class DatabaseError(RuntimeError):
    """Database is not available."""


class QueryLogEntry(NamedTuple):
    """One executed statement."""
    query: str
    params: Any
    is_error: bool
    error_code: int
    error_message: str
    affected: int
    time: float   # miliseconds


class QueryResult(NamedTuple):
    """Rows and statement counters returned by Database.query."""
    rows: list
    affected: int
    last_insert_id: Optional[int]
    columns: tuple = ()


class QueryLog:
    """Bounded query log.

    First ``QUERY_LOG_MAX_SIZE`` entries are stored, next are dropped, so
    older entries are never evicted.
    """

    def __init__(self, max_size: int = QUERY_LOG_MAX_SIZE):
        self.__max_size = max_size
        self.__entries = []

    @property
    def max_size(self):
        return self.__max_size

    @property
    def full(self):
        """True if no next entry will be stored."""
        return len(self.__entries) >= self.__max_size

    @property
    def total_time(self):
        """Sum of all stored statements time in miliseconds."""
        return round(sum(entry.time for entry in self.__entries), 1)

    def append(self, entry: QueryLogEntry):
        """Store entry if log is not full. Returns True if entry is stored."""
        if self.full:
            return False
        self.__entries.append(entry)
        return True

    def __len__(self):
        return len(self.__entries)

    def __iter__(self):
        return iter(self.__entries)

    def __getitem__(self, index):
        return self.__entries[index]


def error_code(err: Exception) -> int:
    """Return driver error number if it is possible."""
    code = getattr(err, 'sqlite_errorcode', None)
    if isinstance(code, int):
        return code
    if err.args and isinstance(err.args[0], int):
        return err.args[0]
    return 0


def error_message(err: Exception) -> str:
    """Return driver error message."""
    if len(err.args) > 1 and isinstance(err.args[0], int):
        return str(err.args[1])
    return str(err)


class Database:
    """DB-API 2.0 connection wrapper.

    .. code:: python

        db = Database(sqlite3.connect(':memory:'))
        db.execute("CREATE TABLE orders (id INTEGER PRIMARY KEY)")
        db.fetch_all("SELECT * FROM orders")     # []
        for entry in db.query_log:
            print(entry.query, entry.time)
    """
    # pylint: disable=too-many-arguments

    def __init__(self, connection, driver=sqlite3,
                 log_queries: bool = True,
                 query_log: Optional[QueryLog] = None,
                 now: str = "CURRENT_TIMESTAMP"):
        self.__connection = connection
        self.__driver = driver
        self.__log_queries = log_queries
        self.__query_log = query_log if query_log is not None else QueryLog()
        self.__now = now
        self.__columns = {}

    @classmethod
    def connect(cls, config: Config, query_log: Optional[QueryLog] = None):
        """Create connection from configuration.

        DatabaseError is raised, if connection is not possible.
        """
        driver_name = config.get('db_driver') or 'sqlite3'
        database = config.get('db_name')
        if not database:
            raise ConfigError("Database name (db_name) is not configured")
        try:
            driver = import_module(driver_name)
        except ImportError as err:
            raise ConfigError("Database driver %s is not available" %
                              driver_name) from err

        try:
            if driver_name == 'sqlite3':
                connection = driver.connect(database)
            else:
                kwargs = {'host': config.get('db_host'),
                          'user': config.get('db_user'),
                          'password': config.get('db_password'),
                          'database': database}
                if config.get('db_port'):
                    kwargs['port'] = int(config.get('db_port'))
                connection = driver.connect(
                    **{key: val for key, val in kwargs.items()
                       if val is not None})
        except driver.Error as err:
            log.error("Unable to connect to database: %s", err)
            raise DatabaseError("Unable to connect to database") from err

        now = "CURRENT_TIMESTAMP" if driver_name == 'sqlite3' else "NOW()"
        return cls(connection, driver, config.log_queries, query_log, now)

    @property
    def connection(self):
        """Raw DB-API connection."""
        return self.__connection

    @property
    def query_log(self):
        return self.__query_log

    @property
    def now(self):
        """Server side expression for current time."""
        return self.__now

    @property
    def paramstyle(self):
        return getattr(self.__driver, 'paramstyle', 'qmark')

    def placeholder(self, index: int, name: str):
        """Return parameter marker by driver paramstyle.

        Index is zero based position of parameter, name is used for named
        styles.
        """
        style = self.paramstyle
        if style == 'qmark':
            return '?'
        if style in ('format', 'pyformat'):
            return '%s'
        if style == 'numeric':
            return ':%d' % (index + 1)
        return ':%s' % name      # named

    def params(self, values: Sequence, names: Sequence[str]) -> Params:
        """Return parameters in driver paramstyle form."""
        if self.paramstyle == 'named':
            return dict(zip(names, values))
        return tuple(values)

    def query(self, sql: str, params: Params = ()):
        """Execute statement, log it, and return QueryResult.

        When statement fails, error is logged to query log and None is
        returned.
        """
        start = perf_counter()
        cursor = self.__connection.cursor()
        try:
            cursor.execute(sql, params)
            names = ()
            if cursor.description is not None:
                names = tuple(col[0] for col in cursor.description)
                rows = [dict(zip(names, row)) for row in cursor.fetchall()]
                affected = len(rows)
            else:
                self.__connection.commit()
                rows = []
                affected = cursor.rowcount
            result = QueryResult(rows, affected,
                                 getattr(cursor, 'lastrowid', None), names)
            self.__log(sql, params, start, affected=affected)
            return result
        except self.__driver.Error as err:
            log.error("Query error: %s\n%s", err, sql)
            self.__log(sql, params, start, err)
            return None
        finally:
            cursor.close()

    def __log(self, sql, params, start, err=None, affected=-1):
        if not self.__log_queries:
            return
        elapsed = round((perf_counter() - start) * 1000, 1)
        log.debug("%.1fms %s", elapsed, sql)
        self.__query_log.append(QueryLogEntry(
            query=sql,
            params=params,
            is_error=err is not None,
            error_code=error_code(err) if err else 0,
            error_message=error_message(err) if err else '',
            affected=affected,
            time=elapsed))

    def fetch_all(self, sql: str, params: Params = ()):
        """Return list of rows as dictionaries, or None on error."""
        result = self.query(sql, params)
        if result is None:
            return None
        return result.rows

    def fetch_one(self, sql: str, params: Params = ()):
        """Return first row, None if there is no row, or False on error."""
        result = self.query(sql, params)
        if result is None:
            return False
        return result.rows[0] if result.rows else None

    def execute(self, sql: str, params: Params = ()):
        """Execute statement and return True on success."""
        return self.query(sql, params) is not None

    def columns(self, table: str):
        """Return tuple of table column names.

        Columns are read from cursor description of empty select, so it works
        with any DB-API driver. Result is cached for connection life.
        """
        if table not in self.__columns:
            result = self.query("SELECT * FROM %s WHERE 1 = 0" % table)
            if result is None:
                log.error("Could not read columns of %s", table)
                return ()
            self.__columns[table] = result.columns
        return self.__columns[table]

    def close(self):
        """Close database connection."""
        self.__connection.close()
