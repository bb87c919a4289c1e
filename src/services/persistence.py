"""세션 저장 게이트웨이

- 쓰기는 디바운스: 짧은 시간 안의 연속 변경은 마지막 한 번만 기록
- 스냅샷에 저장 시각 기록, 만료(기본 30분)된 스냅샷은 복구하지 않고 삭제
- 복구는 같은 감독일 때만, 단계 값이 손상된 스냅샷은 폐기
- 읽기/쓰기 실패는 로그만 남기고 대화는 메모리에서 계속

키:
    <namespace>:session          활성 세션 스냅샷
    <namespace>:chat:<persona>   감독별 메시지 로그
"""

import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from src.core.conversation.errors import InvalidStateError
from src.core.conversation.models import ConversationContext, Message
from src.core.conversation.personas import DirectorPersona, parse_persona
from src.core.conversation.stages import Stage, parse_stage
from src.core.logging import get_logger
from src.services.kv_store import KeyValueStore

logger = get_logger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 2.0
DEFAULT_EXPIRY_SECONDS = 30 * 60


class DebouncedScheduler:
    """마지막으로 예약된 작업 하나만 delay 뒤에 실행한다.

    delay가 0 이하면 예약 즉시 실행.
    실행 중인 작업과 cancel_pending()은 같은 락을 쓰므로,
    cancel_pending()이 돌아온 뒤에는 이전 예약이 실행되지 않는다.
    """

    def __init__(self, delay: float = DEFAULT_DEBOUNCE_SECONDS):
        self.delay = delay
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Callable[[], None]] = None
        self._generation = 0

    def schedule(self, fn: Callable[[], None]) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._pending = fn
            if self.delay <= 0:
                self._run(self._generation)
                return
            timer = threading.Timer(self.delay, self._run, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def flush(self) -> None:
        """대기 중인 작업을 지금 실행."""
        with self._lock:
            self._cancel_timer()
            self._run(self._generation)

    def cancel_pending(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._pending = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _run(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending is None:
                return
            fn, self._pending = self._pending, None
            self._timer = None
            fn()


@dataclass
class RecoveredSession:
    """복구된 세션 스냅샷"""

    director_id: DirectorPersona
    stage: Stage
    turn_count: int
    context: ConversationContext
    message_log: tuple[Message, ...]
    saved_at: float


class SessionPersistenceGateway:
    """ConversationContext + 메시지 로그를 키-값 저장소에 보관"""

    def __init__(
        self,
        store: KeyValueStore,
        namespace: str = "local",
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        expiry_seconds: float = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self.namespace = namespace
        self.expiry_seconds = expiry_seconds
        self._clock = clock
        self._scheduler = DebouncedScheduler(debounce_seconds)

    # === 키 ===

    @property
    def session_key(self) -> str:
        return f"{self.namespace}:session"

    def chat_key(self, persona: DirectorPersona) -> str:
        return f"{self.namespace}:chat:{persona.value}"

    # === 저장 ===

    def persist(
        self,
        context: ConversationContext,
        message_log: Sequence[Message],
        stage: Stage,
        director_id: DirectorPersona,
        turn_count: int,
    ) -> None:
        """디바운스 예약. 실제 기록은 마지막 호출의 값으로 한 번만 일어난다."""
        log = tuple(message_log)
        saved_at = self._clock()

        def write() -> None:
            self._write_now(context, log, stage, director_id, turn_count, saved_at)

        self._scheduler.schedule(write)

    def flush(self) -> None:
        """대기 중인 쓰기를 즉시 수행."""
        self._scheduler.flush()

    @property
    def has_pending_write(self) -> bool:
        return self._scheduler.has_pending

    def _write_now(
        self,
        context: ConversationContext,
        message_log: tuple[Message, ...],
        stage: Stage,
        director_id: DirectorPersona,
        turn_count: int,
        saved_at: float,
    ) -> None:
        snapshot = {
            "saved_at": saved_at,
            "director_id": director_id.value,
            "stage": stage.value,
            "turn_count": turn_count,
            "context": context.to_dict(),
        }
        try:
            self._store.set(self.session_key, _encode(snapshot))
            self._store.set(
                self.chat_key(director_id), _encode([m.to_dict() for m in message_log])
            )
        except Exception:
            logger.exception("Failed to persist chat session (%s)", self.namespace)
            return
        logger.debug(
            "Persisted %s session at %s (turn=%d)", director_id.value, stage.value, turn_count
        )

    # === 복구 ===

    def recover(self, director: DirectorPersona) -> Optional[RecoveredSession]:
        """같은 감독의 유효한 스냅샷이 있으면 반환, 없으면 None.

        대기 중인 쓰기를 먼저 기록하므로 직전 persist() 값이 보인다.
        """
        self._scheduler.flush()
        try:
            raw = self._store.get(self.session_key)
        except Exception:
            logger.exception("Failed to read chat session snapshot (%s)", self.namespace)
            return None
        if raw is None:
            return None

        try:
            snapshot = _decode(raw)
            saved_at = float(snapshot["saved_at"])
            stored_director = parse_persona(snapshot["director_id"])
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable chat session snapshot: %s", e)
            self._remove(self.session_key)
            return None

        if self._clock() - saved_at > self.expiry_seconds:
            logger.info("Chat session snapshot expired, clearing it")
            self._remove(self.session_key)
            return None

        if stored_director is not director:
            logger.info(
                "Snapshot belongs to %s, not %s; ignoring",
                stored_director.value,
                director.value,
            )
            return None

        try:
            stage = parse_stage(snapshot["stage"])
            context = ConversationContext.from_dict(snapshot["context"])
            turn_count = int(snapshot.get("turn_count", 0))
        except InvalidStateError as e:
            logger.warning("Discarding corrupt chat session snapshot: %s", e)
            self._remove(self.session_key)
            return None
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable chat session snapshot: %s", e)
            self._remove(self.session_key)
            return None

        if context.current_stage is not stage:
            logger.warning(
                "Snapshot stage %s disagrees with context stage %s; discarding",
                stage.value,
                context.current_stage.value,
            )
            self._remove(self.session_key)
            return None

        message_log = self.load_message_log(director) or context.message_history
        return RecoveredSession(
            director_id=stored_director,
            stage=stage,
            turn_count=turn_count,
            context=context,
            message_log=message_log,
            saved_at=saved_at,
        )

    def load_message_log(self, persona: DirectorPersona) -> tuple[Message, ...]:
        """감독별 메시지 로그. 없거나 읽을 수 없으면 빈 튜플."""
        try:
            raw = self._store.get(self.chat_key(persona))
        except Exception:
            logger.exception("Failed to read %s message log", persona.value)
            return ()
        if raw is None:
            return ()
        try:
            return tuple(Message.from_dict(m) for m in _decode(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable %s message log: %s", persona.value, e)
            return ()

    # === 삭제 ===

    def clear(self, persona: Optional[DirectorPersona] = None) -> None:
        """대기 중인 쓰기를 취소하고 스냅샷(과 persona의 로그)을 지운다. 여러 번 불러도 된다."""
        self._scheduler.cancel_pending()
        self._remove(self.session_key)
        if persona is not None:
            self._remove(self.chat_key(persona))

    def _remove(self, key: str) -> None:
        try:
            self._store.remove(key)
        except Exception:
            logger.exception("Failed to remove %s", key)


def _encode(payload: Any) -> bytes:
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def _decode(raw: bytes) -> Any:
    return json.loads(raw.decode("utf-8"))
