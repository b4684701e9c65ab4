# tests/test_security.py
import pytest
from fastapi import HTTPException
from codrisk.config import settings
from codrisk.utils.security import secrets_match, require_internal_secret

def test_secret_ok():
    assert secrets_match("shhh", "shhh")

def test_secret_bad():
    assert not secrets_match("shhh", "bad")
    assert not secrets_match("shhh", None)

def test_open_when_unset(monkeypatch):
    monkeypatch.setattr(settings, "INTERNAL_SHARED_SECRET", None)
    require_internal_secret(None)  # no raise

def test_rejects_wrong_secret(monkeypatch):
    monkeypatch.setattr(settings, "INTERNAL_SHARED_SECRET", "shhh")
    with pytest.raises(HTTPException) as exc:
        require_internal_secret("bad")
    assert exc.value.status_code == 401
