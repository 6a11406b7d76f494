"""Model base class with generic select, insert, update and delete.

:Classes:   Model
:Functions: table_name
"""
import re
from logging import getLogger
from typing import Optional

from poormvc.database import Database

log = getLogger("poormvc")

RE_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')
RE_CAMEL = re.compile(r'(?<=[a-z0-9])([A-Z])')

MODEL_AFFIX = 'Model'

# columns filled by database server time
CREATED = 'created'
UPDATED = 'updated'
MODIFIED = 'modified'
TIMESTAMP_COLUMNS = (CREATED, UPDATED, MODIFIED)


def table_name(name: str) -> str:
    """Return table name for model class name.

    >>> table_name('ModelCategory')
    'categories'
    >>> table_name('ModelOrder')
    'orders'
    >>> table_name('ModelOrderItem')
    'order_items'
    >>> table_name('UserModel')
    'users'
    """
    if name.startswith(MODEL_AFFIX) and len(name) > len(MODEL_AFFIX):
        name = name[len(MODEL_AFFIX):]
    elif name.endswith(MODEL_AFFIX) and len(name) > len(MODEL_AFFIX):
        name = name[:-len(MODEL_AFFIX)]

    if name.endswith('y'):
        name = name[:-1] + 'ies'
    else:
        name += 's'
    return RE_CAMEL.sub(r'_\1', name).lower()


def identifier(name: str) -> str:
    """Check column or table name."""
    if not isinstance(name, str) or not RE_IDENTIFIER.match(name):
        raise ValueError("Invalid identifier %r" % (name,))
    return name


class Model:
    """Generic access to one table.

    Table name is derived from class name, or could be set by ``table``
    class attribute.

    .. code:: python

        class ModelCategory(Model):
            pass

        categories = ModelCategory(req.db)
        categories.insert({'name': 'Books'})
        categories.select({'name': 'Books'})    # {'id': 1, 'name': ...}

    Values are always sent as bound parameters. Columns ``created``,
    ``updated`` and ``modified`` are set by server time, never by values
    from caller.
    """
    table: Optional[str] = None

    def __init__(self, db: Database):
        self.db = db

    @classmethod
    def get_table_name(cls):
        """Table name for this model."""
        return identifier(cls.table or table_name(cls.__name__))

    @property
    def table_name(self):
        return self.get_table_name()

    @property
    def columns(self):
        """Tuple of live table columns."""
        return self.db.columns(self.table_name)

    def __where(self, filters, params, names):
        """Return WHERE clause and append parameters for filters."""
        if not filters:
            return ''
        conditions = []
        for column, value in filters.items():
            identifier(column)
            if value is None:
                conditions.append("%s IS NULL" % column)
                continue
            name = "w_%s" % column
            conditions.append("%s = %s" % (
                column, self.db.placeholder(len(params), name)))
            params.append(value)
            names.append(name)
        return " WHERE " + " AND ".join(conditions)

    def select(self, filters: Optional[dict] = None):
        """Select rows matching all filters.

        Returns None when no row is found, dictionary for exactly one row,
        list of dictionaries for more rows and False on query error.
        """
        params, names = [], []
        sql = "SELECT * FROM %s" % self.table_name
        sql += self.__where(filters, params, names)
        rows = self.db.fetch_all(sql, self.db.params(params, names))
        if rows is None:
            return False
        if not rows:
            return None
        if len(rows) == 1:
            return rows[0]
        return rows

    def insert(self, values: dict):
        """Insert row, only columns which exists in table are used."""
        columns, markers, params, names = [], [], [], []
        for column in self.columns:
            if column in TIMESTAMP_COLUMNS:
                columns.append(column)
                markers.append(self.db.now)
            elif column in values:
                columns.append(column)
                markers.append(self.db.placeholder(len(params), column))
                params.append(values[column])
                names.append(column)

        if not columns:
            log.error("No columns to insert into %s", self.table_name)
            return False

        sql = "INSERT INTO %s (%s) VALUES (%s)" % (
            self.table_name, ", ".join(columns), ", ".join(markers))
        return self.db.execute(sql, self.db.params(params, names))

    def update(self, values: dict, filters: Optional[dict] = None):
        """Update rows matching all filters.

        **Without filters, all rows in table are updated.** Columns
        ``updated`` and ``modified`` are always set to server time.
        """
        sets, params, names = [], [], []
        for column in self.columns:
            if column in (UPDATED, MODIFIED) or \
                    (column == CREATED and column in values):
                sets.append("%s = %s" % (column, self.db.now))
            elif column in values:
                sets.append("%s = %s" % (
                    column, self.db.placeholder(len(params), column)))
                params.append(values[column])
                names.append(column)

        if not sets:
            log.error("No columns to update in %s", self.table_name)
            return False

        sql = "UPDATE %s SET %s" % (self.table_name, ", ".join(sets))
        sql += self.__where(filters, params, names)
        return self.db.execute(sql, self.db.params(params, names))

    def delete(self, filters: Optional[dict] = None):
        """Delete rows matching all filters.

        **Without filters, all rows in table are deleted.**
        """
        params, names = [], []
        sql = "DELETE FROM %s" % self.table_name
        sql += self.__where(filters, params, names)
        return self.db.execute(sql, self.db.params(params, names))
