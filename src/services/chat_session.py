"""ChatSession - 감독 한 명과의 대화 세션 상태

세션이 직접 소유하는 것:
- 현재 ConversationContext, 전체 메시지 로그
- TurnBudgetTracker (턴 수, 남은 시간)
- ResponseOrchestrator (오프라인 모드 플래그 포함)
- phase (idle / in_flight): 응답 대기 중 새 전송 거부
- epoch: reset/recover 때 증가. 대기 중이던 응답이 늦게 돌아오면 폐기
- SessionPersistenceGateway (없으면 메모리에서만 진행)

EventBus 처리 단위는 공개 메서드 1회 호출이다.
"""

import random
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from src.config import Settings
from src.core.conversation.budget import TurnBudgetTracker
from src.core.conversation.errors import SessionBusyError, StaleSessionError
from src.core.conversation.models import (
    ConversationContext,
    EmotionTag,
    Message,
    MessageRole,
    new_message_id,
)
from src.core.conversation.personas import (
    DirectorPersona,
    get_profile,
    initial_greeting,
)
from src.core.event_bus import ConversationEvent, EventBus
from src.core.event_types import EventTypes
from src.core.logging import get_logger
from src.services.offline_responses import OFFLINE_MODE_NOTICE
from src.services.persistence import RecoveredSession, SessionPersistenceGateway
from src.services.response_orchestrator import ResponseOrchestrator
from src.services.scenario_generator import ScenarioGenerator

logger = get_logger(__name__)


class SessionPhase(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


@dataclass
class ChatSessionOptions:
    """세션 단위 튜닝 값. 기본값은 Settings 기본값과 같다."""

    time_limit: int = 600
    extension_seconds: int = 180
    max_extensions: int = 3
    milestone_turns: int = 20
    history_limit: int = 20
    history_tail: int = 8
    max_attempts: int = 3
    backoff_base: float = 1.0
    backoff_cap: float = 5.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    rng: Optional[random.Random] = field(default=None, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChatSessionOptions":
        return cls(
            time_limit=settings.CHAT_TIME_LIMIT_SECONDS,
            extension_seconds=settings.TIME_EXTENSION_SECONDS,
            max_extensions=settings.MAX_TIME_EXTENSIONS,
            milestone_turns=settings.ENGAGEMENT_MILESTONE_TURNS,
            history_limit=settings.HISTORY_VIEW_LIMIT,
            history_tail=settings.GENERATOR_HISTORY_TAIL,
            max_attempts=settings.GENERATOR_MAX_ATTEMPTS,
            backoff_base=settings.GENERATOR_BACKOFF_BASE,
            backoff_cap=settings.GENERATOR_BACKOFF_CAP,
        )


class ChatSession:
    """감독 한 명과의 대화 세션"""

    SOURCE = "chat_session"

    def __init__(
        self,
        session_id: str,
        persona: DirectorPersona,
        emotion: EmotionTag,
        generator: ScenarioGenerator,
        vignette: Optional[str] = None,
        gateway: Optional[SessionPersistenceGateway] = None,
        event_bus: Optional[EventBus] = None,
        options: Optional[ChatSessionOptions] = None,
    ) -> None:
        self.session_id = session_id
        self.persona = persona
        self.emotion = emotion
        self.generator = generator
        self.gateway = gateway
        self.bus = event_bus or EventBus()
        self.options = options or ChatSessionOptions()
        self._vignette = vignette

        self._lock = threading.RLock()
        self._epoch = 0
        self.phase = SessionPhase.IDLE

        self.context = ConversationContext.create(emotion, vignette)
        self.message_log: list[Message] = []
        self.tracker = self._new_tracker()
        self.orchestrator = self._new_orchestrator()

        self.bus.subscribe(EventTypes.TIME_UP, self._on_time_up)
        self.bus.subscribe(EventTypes.ENGAGEMENT_MILESTONE, self._on_milestone)

    # === 공개 API ===

    def start(self) -> Message:
        """첫 인사 추가. 이미 있으면 기존 인사를 그대로 돌려준다."""
        with self._lock:
            try:
                return self._greet()
            finally:
                self.bus.reset_chain()

    def send(self, text: str, message_id: Optional[str] = None) -> Message:
        """사용자 메시지 1건 전송 → 감독 응답.

        Raises:
            ValueError: 빈 메시지
            SessionBusyError: 이전 전송의 응답을 기다리는 중
            StaleSessionError: 기다리는 동안 세션이 리셋되어 응답을 폐기함
        """
        if not text or not text.strip():
            raise ValueError("message text is blank")

        with self._lock:
            if self.phase is SessionPhase.IN_FLIGHT:
                raise SessionBusyError(f"Session {self.session_id} is waiting for a reply")
            if message_id is not None and self._has_message(message_id):
                logger.debug(f"Duplicate message id ignored: {message_id}")
                return self._last_assistant_message()

            self.phase = SessionPhase.IN_FLIGHT
            epoch = self._epoch
            context = self.context
            turn_count = self.tracker.turn_count
            orchestrator = self.orchestrator
            was_offline = orchestrator.offline_mode

        user_id = message_id or new_message_id("user")
        try:
            updated, reply = orchestrator.advance_conversation(
                context, text, turn_count, user_message_id=user_id
            )
        except Exception:
            with self._lock:
                if epoch == self._epoch:
                    self.phase = SessionPhase.IDLE
            raise

        with self._lock:
            if epoch != self._epoch:
                logger.info(f"Discarding late reply for reset session {self.session_id}")
                raise StaleSessionError(
                    f"Session {self.session_id} was reset while waiting for a reply"
                )
            self.phase = SessionPhase.IDLE
            try:
                self._commit_turn(context, updated, user_id, text, reply, was_offline)
            finally:
                self.bus.reset_chain()
            return reply

    def tick(self, seconds: int = 1) -> int:
        """카운트다운 진행. 남은 초 반환."""
        with self._lock:
            try:
                return self.tracker.tick(seconds)
            finally:
                self.bus.reset_chain()

    def extend_time(self) -> bool:
        with self._lock:
            return self.tracker.extend()

    def reset(self) -> Message:
        """새 대화로 초기화. 저장된 스냅샷도 지우고 새 인사를 돌려준다."""
        with self._lock:
            self._epoch += 1
            self.phase = SessionPhase.IDLE
            if self.gateway is not None:
                self.gateway.clear(self.persona)
            self.context = ConversationContext.create(self.emotion, self._vignette)
            self.message_log = []
            self.tracker = self._new_tracker()
            self.orchestrator = self._new_orchestrator()
            try:
                self._emit(EventTypes.SESSION_RESET, {"persona": self.persona.value})
                logger.info(f"Session {self.session_id} reset")
                return self._greet()
            finally:
                self.bus.reset_chain()

    def recover(self) -> Optional[RecoveredSession]:
        """같은 감독의 저장 스냅샷으로 복원. 없으면 None.

        Raises:
            SessionBusyError: 응답 대기 중
        """
        with self._lock:
            if self.phase is SessionPhase.IN_FLIGHT:
                raise SessionBusyError(f"Session {self.session_id} is waiting for a reply")
            if self.gateway is None:
                return None
            recovered = self.gateway.recover(self.persona)
            if recovered is None:
                return None

            self._epoch += 1
            self.context = recovered.context
            self.emotion = recovered.context.emotion
            self._vignette = recovered.context.vignette
            self.message_log = list(recovered.message_log)
            self.tracker.restore_turns(recovered.turn_count)
            try:
                self._emit(
                    EventTypes.SESSION_RECOVERED,
                    {"stage": recovered.stage.value, "turn_count": recovered.turn_count},
                )
            finally:
                self.bus.reset_chain()
            logger.info(
                f"Session {self.session_id} recovered at {recovered.stage.value} "
                f"(turn={recovered.turn_count})"
            )
            return recovered

    def flush(self) -> None:
        """대기 중인 저장을 즉시 기록."""
        if self.gateway is not None:
            self.gateway.flush()

    def expire(self) -> None:
        """만료 처리: 대기 중인 저장 취소, 저장분 삭제. 늦게 온 응답은 폐기된다."""
        with self._lock:
            self._epoch += 1
            if self.gateway is not None:
                self.gateway.clear(self.persona)

    @property
    def offline_mode(self) -> bool:
        return self.orchestrator.offline_mode

    # === 내부 ===

    def _greet(self) -> Message:
        greeting_id = f"greeting-{self.persona.value}"
        for message in self.message_log:
            if message.id == greeting_id:
                return message

        greeting = Message(
            id=greeting_id,
            role=MessageRole.ASSISTANT,
            content=initial_greeting(self.persona, self.context.vignette),
            choices=get_profile(self.persona).default_choices,
        )
        self.context = self.context.with_message(greeting, self.options.history_limit)
        self._append(greeting)
        self._schedule_persist()
        return greeting

    def _commit_turn(
        self,
        previous: ConversationContext,
        updated: ConversationContext,
        user_id: str,
        text: str,
        reply: Message,
        was_offline: bool,
    ) -> None:
        user_message = next(
            (m for m in updated.message_history if m.id == user_id),
            Message(id=user_id, role=MessageRole.USER, content=text),
        )
        self.context = updated
        added = [m for m in (user_message, reply) if self._log_message(m)]
        for _ in added:
            self.tracker.record_message()

        if self.orchestrator.offline_mode and not was_offline:
            self._append_system("offline", OFFLINE_MODE_NOTICE)

        if updated.current_stage is not previous.current_stage:
            self._emit(
                EventTypes.STAGE_CHANGED,
                {
                    "stage": updated.current_stage.value,
                    "previous": previous.current_stage.value,
                },
            )
        self._schedule_persist()

    def _log_message(self, message: Message) -> bool:
        """로그에만 추가. 같은 id면 False."""
        if self._has_message(message.id):
            return False
        self.message_log.append(message)
        return True

    def _append(self, message: Message) -> None:
        """로그 추가 + 턴 카운트"""
        if self._log_message(message):
            self.tracker.record_message()

    def _append_system(self, kind: str, content: str) -> None:
        # 시스템 안내는 턴 수에 포함하지 않는다
        self.message_log.append(
            Message(id=new_message_id(kind), role=MessageRole.SYSTEM, content=content)
        )

    def _has_message(self, message_id: str) -> bool:
        return any(m.id == message_id for m in self.message_log)

    def _last_assistant_message(self) -> Message:
        for message in reversed(self.message_log):
            if message.role is MessageRole.ASSISTANT:
                return message
        return self._greet()

    def _schedule_persist(self) -> None:
        if self.gateway is None:
            return
        self.gateway.persist(
            self.context,
            self.message_log,
            self.context.current_stage,
            self.persona,
            self.tracker.turn_count,
        )

    def _emit(self, event_type: str, data: dict) -> None:
        self.bus.emit(ConversationEvent(event_type=event_type, data=data, source=self.SOURCE))

    def _on_time_up(self, event: ConversationEvent) -> None:
        self._append_system("farewell", get_profile(self.persona).farewell)

    def _on_milestone(self, event: ConversationEvent) -> None:
        self._append_system("cast-offer", get_profile(self.persona).cast_offer)

    def _new_tracker(self) -> TurnBudgetTracker:
        o = self.options
        return TurnBudgetTracker(
            event_bus=self.bus,
            time_limit=o.time_limit,
            extension_seconds=o.extension_seconds,
            max_extensions=o.max_extensions,
            milestone_turns=o.milestone_turns,
        )

    def _new_orchestrator(self) -> ResponseOrchestrator:
        o = self.options
        return ResponseOrchestrator(
            self.generator,
            self.persona,
            event_bus=self.bus,
            max_attempts=o.max_attempts,
            backoff_base=o.backoff_base,
            backoff_cap=o.backoff_cap,
            sleep=o.sleep,
            rng=o.rng,
            history_limit=o.history_limit,
            history_tail=o.history_tail,
        )
