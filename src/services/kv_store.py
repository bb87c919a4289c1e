"""키-값 바이트 저장소

세션 저장 게이트웨이가 쓰는 get / set / remove 세 연산.
SQL 구현은 호출마다 새 DB 세션을 열어서 타이머 스레드에서도 쓸 수 있다.
"""

from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from sqlalchemy.orm import Session

from src.core.logging import get_logger
from src.db.models import KeyValueEntryModel

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...

    def remove(self, key: str) -> None: ...


class SqlKeyValueStore:
    """kv_entries 테이블 기반 저장소"""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[bytes]:
        with self._session_factory() as db:
            row = db.get(KeyValueEntryModel, key)
            if row is None:
                return None
            return row.value

    def set(self, key: str, value: bytes) -> None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        with self._session_factory() as db:
            row = db.get(KeyValueEntryModel, key)
            if row is None:
                db.add(KeyValueEntryModel(key=key, value=value, updated_at=now))
            else:
                row.value = value
                row.updated_at = now
            db.commit()
        logger.debug("kv set: %s (%d bytes)", key, len(value))

    def remove(self, key: str) -> None:
        with self._session_factory() as db:
            row = db.get(KeyValueEntryModel, key)
            if row is not None:
                db.delete(row)
                db.commit()
