import hmac
from fastapi import Header, HTTPException

from ..config import settings

def secrets_match(expected: str, provided: str | None) -> bool:
    # Timing-safe compare
    return hmac.compare_digest(expected.encode(), (provided or "").encode())

def require_internal_secret(x_internal_secret: str | None = Header(default=None)) -> None:
    expected = settings.INTERNAL_SHARED_SECRET
    if not expected:
        return
    if not secrets_match(expected, x_internal_secret):
        raise HTTPException(status_code=401, detail="Invalid internal secret")
