import pytest
from sqlalchemy.orm import sessionmaker

from codrisk.database import Base, make_engine
from codrisk import models  # noqa: F401

@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()

@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()

@pytest.fixture
def clean_order():
    return {
        "id": "ord-1",
        "user_id": "user-1",
        "shipping_address": "Karim Uddin, 01712345678, House 5, Road 2, Dhaka",
        "total_amount": 1200,
        "created_at": "2026-03-01T10:00:00+00:00",
        "status": "pending",
        "items": [{"sku": "CAT-FOOD-1", "qty": 2}],
    }
