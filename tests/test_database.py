"""Tests for Database wrapper and QueryLog."""
import sqlite3

from pytest import fixture, raises

from poormvc.config import Config, ConfigError
from poormvc.database import Database, DatabaseError, QueryLog, \
    QueryLogEntry, QUERY_LOG_MAX_SIZE

# pylint: disable=missing-function-docstring
# pylint: disable=redefined-outer-name
# pylint: disable=no-self-use


@fixture
def db():
    db = Database(sqlite3.connect(':memory:'))
    db.execute("CREATE TABLE orders (id INTEGER PRIMARY KEY, name TEXT)")
    yield db
    db.close()


def entry(time=1.0):
    return QueryLogEntry("SELECT 1", (), False, 0, '', 1, time)


class TestQueryLog:
    """Bounded query log."""

    def test_default_size(self):
        assert QueryLog().max_size == QUERY_LOG_MAX_SIZE == 200

    def test_first_entries_win(self):
        query_log = QueryLog(3)
        for i in range(5):
            query_log.append(entry(float(i)))
        assert len(query_log) == 3
        assert query_log.full
        assert [it.time for it in query_log] == [0.0, 1.0, 2.0]

    def test_append_result(self):
        query_log = QueryLog(1)
        assert query_log.append(entry())
        assert not query_log.append(entry())

    def test_total_time(self):
        query_log = QueryLog()
        query_log.append(entry(1.5))
        query_log.append(entry(2.0))
        assert query_log.total_time == 3.5


class TestQuery:
    """Statements execution."""

    def test_insert_select(self, db):
        assert db.execute("INSERT INTO orders (name) VALUES (?)", ('tea',))
        rows = db.fetch_all("SELECT * FROM orders")
        assert rows == [{'id': 1, 'name': 'tea'}]

    def test_result(self, db):
        result = db.query("INSERT INTO orders (name) VALUES (?)", ('tea',))
        assert result.affected == 1
        assert result.last_insert_id == 1
        assert result.rows == []

    def test_fetch_one(self, db):
        assert db.fetch_one("SELECT * FROM orders") is None
        db.execute("INSERT INTO orders (name) VALUES ('tea')")
        assert db.fetch_one("SELECT name FROM orders") == {'name': 'tea'}

    def test_error(self, db):
        assert db.query("SELECT * FROM missing") is None
        assert db.fetch_all("SELECT * FROM missing") is None
        assert db.fetch_one("SELECT * FROM missing") is False
        assert not db.execute("SELECT * FROM missing")

    def test_error_logged(self, db):
        db.query("SELECT * FROM missing")
        last = db.query_log[-1]
        assert last.is_error
        assert "missing" in last.error_message
        assert last.affected == -1

    def test_logged(self, db):
        db.fetch_all("SELECT * FROM orders")
        last = db.query_log[-1]
        assert last.query == "SELECT * FROM orders"
        assert not last.is_error
        assert last.affected == 0
        assert last.time >= 0

    def test_log_disabled(self):
        db = Database(sqlite3.connect(':memory:'), log_queries=False)
        db.execute("SELECT 1")
        assert len(db.query_log) == 0

    def test_log_limit(self, db):
        count = QUERY_LOG_MAX_SIZE + 10
        for i in range(count):
            assert db.execute("INSERT INTO orders (name) VALUES (?)",
                              ("order %d" % i,))
        assert len(db.query_log) == QUERY_LOG_MAX_SIZE
        assert db.query_log[0].query.startswith("CREATE TABLE")
        assert db.fetch_one("SELECT COUNT(*) AS cnt FROM orders") == \
            {"cnt": count}

    def test_columns(self, db):
        assert db.columns('orders') == ('id', 'name')
        last = db.query_log[-1]
        assert last.query == "SELECT * FROM orders WHERE 1 = 0"
        assert not last.is_error
        assert db.columns('missing') == ()
        assert db.query_log[-1].is_error

    def test_columns_cached(self, db):
        db.columns('orders')
        db.columns('orders')
        assert len(db.query_log) == 2


class TestParams:
    """Parameter markers by driver paramstyle."""

    def test_qmark(self, db):
        assert db.paramstyle == 'qmark'
        assert db.placeholder(0, 'name') == '?'
        assert db.params(['a'], ['name']) == ('a',)

    def test_styles(self):
        # pylint: disable=too-few-public-methods
        class Driver:
            """Driver mock."""
            paramstyle = 'named'
            Error = Exception

        db = Database(None, Driver)
        assert db.placeholder(0, 'name') == ':name'
        assert db.params(['a'], ['name']) == {'name': 'a'}
        Driver.paramstyle = 'format'
        assert db.placeholder(0, 'name') == '%s'
        Driver.paramstyle = 'numeric'
        assert db.placeholder(1, 'name') == ':2'


class TestConnect:
    """Connection from configuration."""

    def test_sqlite(self):
        db = Database.connect(Config('local', {'db_name': ':memory:'}))
        assert db.now == "CURRENT_TIMESTAMP"
        assert db.fetch_one("SELECT 1 AS one") == {'one': 1}
        db.close()

    def test_shared_log(self):
        query_log = QueryLog()
        db = Database.connect(Config('local', {'db_name': ':memory:'}),
                              query_log)
        db.execute("SELECT 1")
        assert len(query_log) == 1
        assert db.query_log is query_log

    def test_no_name(self):
        with raises(ConfigError):
            Database.connect(Config('local'))

    def test_no_driver(self):
        with raises(ConfigError):
            Database.connect(Config('local', {'db_name': 'x',
                                              'db_driver': 'no_such_db'}))

    def test_unavailable(self, tmp_path):
        path = str(tmp_path / 'missing' / 'shop.db')
        with raises(DatabaseError):
            Database.connect(Config('local', {'db_name': path}))
