# tests/test_api.py
import pytest
from fastapi.testclient import TestClient

from codrisk.config import settings
from codrisk.database import get_db
from codrisk.main import app

@pytest.fixture
def client(session_factory):
    def _db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()
    app.dependency_overrides[get_db] = _db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

def test_health(client):
    assert client.get("/health").json() == {"ok": True}

def test_analyze_returns_label(client, clean_order):
    r = client.post("/v1/orders/analyze", json={
        "order": clean_order,
        "profile": {"full_name": "Rahima Begum", "phone": None},
        "user_orders": [clean_order],
    })
    assert r.status_code == 200
    body = r.json()
    assert body["score"] == 15
    assert body["level"] == "low"
    assert body["label"] == "Low Risk"
    assert body["signals"][0]["category"] == "name"

def test_analyze_persists_and_lists(client, clean_order):
    order = dict(clean_order, shipping_address="Zzzq Xkcd, 12345678, Qwrtp", total_amount=6000)
    r = client.post("/v1/orders/analyze", json={"order": order, "persist": True})
    assert r.status_code == 200
    assert r.json()["level"] == "high"

    rows = client.get("/v1/orders/risk", params={"level": "high"}).json()
    assert [row["order_id"] for row in rows] == ["ord-1"]
    assert rows[0]["score"] == 65
    assert rows[0]["label"] == "High Risk"
    assert client.get("/v1/orders/risk", params={"level": "low"}).json() == []

    evidence = client.get("/v1/orders/ord-1/evidence").json()
    assert [e["key"] for e in evidence] == ["input", "parsed_address", "scores"]
    assert evidence[1]["value"]["phone"] == "12345678"

def test_reanalyze_updates_verdict(client, clean_order):
    client.post("/v1/orders/analyze", json={"order": clean_order, "persist": True})
    client.post("/v1/orders/analyze", json={
        "order": clean_order, "profile": {"full_name": "Someone Else"}, "persist": True,
    })
    rows = client.get("/v1/orders/risk").json()
    assert len(rows) == 1
    assert rows[0]["score"] == 15

def test_invalid_order_is_422(client):
    r = client.post("/v1/orders/analyze", json={"order": {"id": "ord-1"}})
    assert r.status_code == 422

def test_batch(client, clean_order):
    second = dict(clean_order, id="ord-2", created_at="2026-03-01T10:30:00+00:00")
    r = client.post("/v1/orders/analyze/batch", json={"orders": [clean_order, second]})
    assert r.status_code == 200
    body = r.json()
    assert body["ord-1"]["score"] == 20
    assert body["ord-2"]["level"] == "medium"

def test_internal_secret(client, clean_order, monkeypatch):
    monkeypatch.setattr(settings, "INTERNAL_SHARED_SECRET", "s3cret")
    payload = {"order": clean_order}
    assert client.post("/v1/orders/analyze", json=payload).status_code == 401
    assert client.post("/v1/orders/analyze", json=payload,
                       headers={"X-Internal-Secret": "nope"}).status_code == 401
    assert client.post("/v1/orders/analyze", json=payload,
                       headers={"X-Internal-Secret": "s3cret"}).status_code == 200
    assert client.get("/health").status_code == 200
