# tests/test_tasks.py
import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from codrisk.errors import InvalidOrderError
from codrisk.models import OrderRisk, EvidenceLog
from codrisk.workers import tasks

@pytest.fixture(autouse=True)
def _test_db(session_factory, monkeypatch):
    monkeypatch.setattr(tasks, "get_sessionmaker", lambda: session_factory)

def test_task_scores_and_records(db, clean_order):
    out = tasks.analyze_order_async(clean_order, {"full_name": "Karim Uddin"}, [clean_order])
    assert out == {"ok": True, "order_id": "ord-1", "score": 0, "level": "low"}

    row = db.execute(select(OrderRisk).where(OrderRisk.order_id == "ord-1")).scalar_one()
    assert row.level == "low"
    assert row.signals == []
    keys = db.execute(select(EvidenceLog.key).where(EvidenceLog.order_id == "ord-1")).scalars().all()
    assert sorted(keys) == ["input", "parsed_address", "scores"]

def test_task_rejects_invalid_order():
    with pytest.raises(InvalidOrderError):
        tasks.analyze_order_async({"shipping_address": "Karim, 01712345678"})

@pytest.mark.parametrize("payload", ["ord-1", None, ["ord-1"]])
def test_task_rejects_non_mapping_payload(payload):
    with pytest.raises(InvalidOrderError):
        tasks.analyze_order_async(payload)

def test_task_retries_only_database_errors():
    assert tasks.analyze_order_async.autoretry_for == (SQLAlchemyError,)

def test_database_failure_propagates(clean_order, monkeypatch):
    def broken():
        raise OperationalError("INSERT", {}, Exception("database is locked"))
    monkeypatch.setattr(tasks, "get_sessionmaker", lambda: broken)
    with pytest.raises(OperationalError):
        tasks.analyze_order_async.run(clean_order)
