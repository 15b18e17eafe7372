from __future__ import annotations

import threading

import pytest

from src.attended_checkin.attended_checkin.database.mysql_base import TransactionScope


class FakeCursor:
    def close(self):
        pass


class FakeConn:
    def __init__(self, name):
        self.name = name
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return FakeCursor()

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self):
        self.opened = []
        self._lock = threading.Lock()

    def connect(self):
        with self._lock:
            conn = FakeConn(f"conn{len(self.opened)}")
            self.opened.append(conn)
            return conn


def test_nested_begin_joins_outer_transaction():
    factory = FakeConnFactory()
    scope = TransactionScope(factory)

    with scope.begin():
        with scope.cursor() as (outer, _):
            pass
        with scope.begin():
            with scope.cursor() as (inner, _):
                pass

    assert inner is outer
    assert len(factory.opened) == 1
    assert outer.committed and outer.closed
    assert not scope.active


def test_failed_block_rolls_back():
    factory = FakeConnFactory()
    scope = TransactionScope(factory)

    with pytest.raises(RuntimeError):
        with scope.begin():
            raise RuntimeError("boom")

    conn = factory.opened[0]
    assert conn.rolled_back and not conn.committed
    assert not scope.active


def test_concurrent_requests_get_their_own_transaction():
    factory = FakeConnFactory()
    scope = TransactionScope(factory)
    a_started = threading.Event()
    b_done = threading.Event()
    used = {}

    def request_a():
        try:
            with scope.begin():
                with scope.cursor() as (conn, _):
                    used["a"] = conn
                a_started.set()
                b_done.wait(timeout=5)
                raise RuntimeError("family A failed")
        except RuntimeError:
            pass

    def request_b():
        a_started.wait(timeout=5)
        with scope.begin():
            with scope.cursor() as (conn, _):
                used["b"] = conn
        b_done.set()

    threads = [threading.Thread(target=request_a), threading.Thread(target=request_b)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert used["a"] is not used["b"]
    assert used["b"].committed and not used["b"].rolled_back
    assert used["a"].rolled_back and not used["a"].committed
