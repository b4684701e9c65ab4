from typing import Generator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from sqlalchemy.pool import StaticPool
from .config import settings

_PG_PREFIXES = ("postgresql://", "postgres://")


def normalize_db_url(url: str) -> str:
    """Point bare postgres URLs at the psycopg 3 driver; everything else passes through."""
    for prefix in _PG_PREFIXES:
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def make_engine(url: Optional[str] = None) -> Engine:
    url = normalize_db_url(url or settings.DATABASE_URL)
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    # API threads and celery workers share connections
    kwargs = {"connect_args": {"check_same_thread": False}}
    if _is_memory_sqlite(url):
        # one connection, or every session sees its own empty database
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


class Base(DeclarativeBase):
    pass


_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = make_engine()
    return _engine


def get_sessionmaker() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autocommit=False, autoflush=False)
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()
