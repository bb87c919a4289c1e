"""Database engine and session factory."""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.config import settings

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def make_engine(url: str, echo: bool = False) -> Engine:
    """SQLite는 스레드 검사를 끈다 (디바운스 저장이 타이머 스레드에서 돈다).
    메모리 DB는 연결 하나를 공유해야 테이블이 보인다."""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo)
    kwargs = {"connect_args": {"check_same_thread": False}, "echo": echo}
    if url in _MEMORY_URLS:
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = make_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and ensure it is closed after use (FastAPI dependency)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
