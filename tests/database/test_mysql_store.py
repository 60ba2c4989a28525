import pytest

from tutoring_center.database.mysql_store import READ_ISOLATION, WRITE_ISOLATION, MySQLStore


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.calls = []
        self.cursor_obj = FakeCursor()

    def start_transaction(self, *, isolation_level=None, readonly=False):
        self.calls.append(("start", isolation_level, readonly))

    def cursor(self, dictionary=False):
        return self.cursor_obj

    def commit(self):
        self.calls.append("commit")

    def rollback(self):
        self.calls.append("rollback")

    def close(self):
        self.calls.append("close")


class FakeConnectionFactory:
    def __init__(self):
        self.connections = []

    def connect(self, *, with_database=True):
        conn = FakeConnection()
        self.connections.append(conn)
        return conn


def test_transaction_commits_on_success():
    factory = FakeConnectionFactory()

    with MySQLStore(factory).transaction() as tx:
        assert tx.courses is not None

    conn = factory.connections[0]
    assert conn.calls == [("start", WRITE_ISOLATION, False), "commit", "close"]
    assert conn.cursor_obj.closed


def test_transaction_rolls_back_and_reraises():
    factory = FakeConnectionFactory()

    with pytest.raises(RuntimeError):
        with MySQLStore(factory).transaction():
            raise RuntimeError("boom")

    assert factory.connections[0].calls == [("start", WRITE_ISOLATION, False), "rollback", "close"]


def test_reader_is_read_only():
    factory = FakeConnectionFactory()

    with MySQLStore(factory).reader() as rd:
        assert rd.students is not None

    assert factory.connections[0].calls[0] == ("start", READ_ISOLATION, True)
