"""세션 id → ChatSession 레지스트리 (HTTP 계층용)"""

import threading
import time
import uuid
from typing import Callable, Optional

from src.core.conversation.errors import SessionNotFoundError
from src.core.conversation.models import EmotionTag
from src.core.conversation.personas import DirectorPersona
from src.core.event_bus import EventBus
from src.core.logging import get_logger
from src.services.chat_session import ChatSession, ChatSessionOptions
from src.services.kv_store import KeyValueStore
from src.services.persistence import SessionPersistenceGateway
from src.services.scenario_generator import ScenarioGenerator

logger = get_logger(__name__)


class SessionRegistry:
    """살아 있는 ChatSession 보관소

    세션마다 EventBus 하나, 저장 네임스페이스 하나(세션 id).
    expiry_seconds 동안 접근이 없던 세션은 create/get 때 만료 처리되어
    메모리와 저장소에서 함께 지워진다.
    """

    def __init__(
        self,
        generator: ScenarioGenerator,
        store: Optional[KeyValueStore] = None,
        options: Optional[ChatSessionOptions] = None,
        debounce_seconds: float = 2.0,
        expiry_seconds: float = 30 * 60,
        bus_factory: Callable[[], EventBus] = EventBus,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.generator = generator
        self.store = store
        self.options = options or ChatSessionOptions()
        self.debounce_seconds = debounce_seconds
        self.expiry_seconds = expiry_seconds
        self._bus_factory = bus_factory
        self._clock = clock
        self._sessions: dict[str, ChatSession] = {}
        self._last_active: dict[str, float] = {}
        self._lock = threading.Lock()

    def create(
        self,
        persona: DirectorPersona,
        emotion: EmotionTag,
        vignette: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> ChatSession:
        """세션 생성 + 첫 인사.

        session_id를 주면 같은 네임스페이스의 저장분부터 복구를 시도하고,
        복구되면 인사를 새로 붙이지 않는다. 같은 id의 세션이 살아 있으면
        그 세션의 대기 중인 저장을 먼저 기록하고 교체한다.
        """
        self._evict_expired()
        sid = session_id or uuid.uuid4().hex
        if session_id is not None:
            self.discard(session_id)

        gateway = None
        if self.store is not None:
            gateway = SessionPersistenceGateway(
                self.store,
                namespace=sid,
                debounce_seconds=self.debounce_seconds,
                expiry_seconds=self.expiry_seconds,
                clock=self._clock,
            )
        session = ChatSession(
            sid,
            persona,
            emotion,
            self.generator,
            vignette=vignette,
            gateway=gateway,
            event_bus=self._bus_factory(),
            options=self.options,
        )
        if session_id is None or session.recover() is None:
            session.start()
        with self._lock:
            self._sessions[sid] = session
            self._last_active[sid] = self._clock()
        logger.info(f"Chat session {sid} created ({persona.value}, {emotion.value})")
        return session

    def get(self, session_id: str) -> ChatSession:
        self._evict_expired()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._last_active[session_id] = self._clock()
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def discard(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
            self._last_active.pop(session_id, None)
        if session is not None:
            session.flush()

    def flush_all(self) -> None:
        """종료 시 대기 중인 저장을 모두 기록."""
        with self._lock:
            sessions = list(self._sessions.values())
        for session in sessions:
            session.flush()

    def _evict_expired(self) -> None:
        now = self._clock()
        with self._lock:
            expired = [
                sid
                for sid, last in self._last_active.items()
                if now - last > self.expiry_seconds
            ]
            sessions = [self._sessions.pop(sid) for sid in expired]
            for sid in expired:
                del self._last_active[sid]
        for session in sessions:
            session.expire()
            logger.info(f"Chat session {session.session_id} expired")

    def __len__(self) -> int:
        return len(self._sessions)
