"""Unit tests for TransactionManager."""

from __future__ import annotations

import pytest

from daas_db.core.engine import Engine
from daas_db.core.exceptions import ConstraintViolation, TransactionStateError
from daas_db.core.query import Insert, Select

COUNT = "SELECT COUNT(*) AS cnt FROM bots"


def _insert(username: str) -> Insert:
    return Insert("bots", {"username": username, "password": "pw"})


class TestTransactionManager:
    def test_commit_persists_changes(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            tx.execute_returning(_insert("alice"))

        assert engine.fetch_scalar(COUNT) == 1

    def test_auto_rollback_on_exception(self, engine: Engine) -> None:
        with pytest.raises(RuntimeError, match="boom"), engine.transaction() as tx:
            tx.execute_returning(_insert("alice"))
            raise RuntimeError("boom")

        assert engine.fetch_scalar(COUNT) == 0

    def test_explicit_rollback(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            tx.execute_returning(_insert("alice"))
            tx.rollback()
            assert not tx.is_active

        assert engine.fetch_scalar(COUNT) == 0

    def test_reads_see_own_writes(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            rows = tx.execute_returning(_insert("alice"))
            row = tx.fetch_one(Select("bots", columns=["username"], where={"id": rows[0]["id"]}))
            assert row == {"username": "alice"}
            assert tx.fetch_scalar(COUNT) == 1
            assert len(tx.fetch_all(Select("bots", columns=["id"]))) == 1

    def test_driver_error_is_translated(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            tx.execute_returning(_insert("alice"))
            with pytest.raises(ConstraintViolation):
                tx.execute_returning(_insert("alice"))
            # Still usable until the caller decides
            assert tx.is_active

    def test_commit_after_rollback(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            tx.rollback()
            with pytest.raises(TransactionStateError):
                tx.commit()

    def test_execute_after_commit(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            tx.commit()
            with pytest.raises(TransactionStateError):
                tx.execute(COUNT)

    def test_commit_outside_context(self, engine: Engine) -> None:
        tx = engine.transaction()
        with pytest.raises(TransactionStateError) as exc_info:
            tx.commit()
        assert exc_info.value.current_state == "idle"

    def test_not_reentrant(self, engine: Engine) -> None:
        tx = engine.transaction()
        with tx:
            pass
        with pytest.raises(TransactionStateError):
            tx.__enter__()
