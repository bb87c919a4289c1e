"""SQLAlchemy ORM models.

세션 저장은 키-값 한 테이블만 쓴다. 값은 UTF-8 JSON 바이트.
"""

from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class KeyValueEntryModel(Base):
    """ORM model for a key-value byte entry."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
