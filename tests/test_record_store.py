"""Tests for the SQLAlchemy-backed record store."""

import asyncio
import threading

import pytest
from sqlalchemy.exc import OperationalError

from wealth_api.core.record_store import RecordKind, RecordStoreError, SqlAlchemyRecordStore
from wealth_api.models.financial import Asset, Income, User


class FakeQuery:
    def __init__(self, rows=(), error=None):
        self.rows = list(rows)
        self.error = error
        self.thread_ids = []

    def all(self):
        self.thread_ids.append(threading.get_ident())
        if self.error is not None:
            raise self.error
        return list(self.rows)


class FakeSession:
    def __init__(self, query):
        self._query = query
        self.queried = []

    def query(self, model):
        self.queried.append(model)
        return self._query


def _fetch(store, kind):
    async def run():
        rows = await store.fetch_all(kind)
        return rows, threading.get_ident()

    return asyncio.run(run())


def test_fetch_runs_off_the_event_loop_thread():
    query = FakeQuery(rows=["row"])
    store = SqlAlchemyRecordStore(FakeSession(query))

    rows, loop_thread = _fetch(store, RecordKind.ASSET)

    assert rows == ["row"]
    assert len(query.thread_ids) == 1
    assert query.thread_ids[0] != loop_thread


def test_fetch_picks_model_for_kind():
    session = FakeSession(FakeQuery())
    store = SqlAlchemyRecordStore(session)

    _fetch(store, RecordKind.INCOME)

    assert session.queried == [Income]


def test_database_error_becomes_store_error():
    error = OperationalError("SELECT * FROM assets", {}, Exception("database is locked"))
    store = SqlAlchemyRecordStore(FakeSession(FakeQuery(error=error)))

    with pytest.raises(RecordStoreError, match="Failed to aggregate financial data") as excinfo:
        _fetch(store, RecordKind.ASSET)

    assert excinfo.value.__cause__ is error


def test_fetch_all_spans_every_owner(db_session):
    alice = User(name="Alice", email="alice@example.com", hashed_password="x")
    bob = User(name="Bob", email="bob@example.com", hashed_password="x")
    db_session.add_all([alice, bob])
    db_session.flush()
    db_session.add_all(
        [
            Asset(user_id=alice.id, description="Savings", category="Cash", amount=1000),
            Asset(user_id=bob.id, description="Car", category="Vehicle", amount=8000),
            Income(user_id=bob.id, description="Salary", category="Job", amount=3000),
        ]
    )
    db_session.commit()
    store = SqlAlchemyRecordStore(db_session)

    rows, _ = _fetch(store, RecordKind.ASSET)

    assert sorted(row.description for row in rows) == ["Car", "Savings"]
    assert {row.user_id for row in rows} == {alice.id, bob.id}
    assert all(isinstance(row, Asset) for row in rows)


def test_fetch_all_empty_table(db_session):
    rows, _ = _fetch(SqlAlchemyRecordStore(db_session), RecordKind.LIABILITY)
    assert rows == []
