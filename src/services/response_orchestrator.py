"""ResponseOrchestrator - 사용자 입력 1건을 대화 1턴으로 진행

흐름:
1. 다음 단계 계산 (현재 단계, 누적 메시지 수, 사용자 입력)
2. 현재(전이 전) 단계 기준으로 detail 누적
3. 사용자 메시지 추가 후 생성기 요청 조립
4. 생성기 호출. 실패 시 지수 백오프로 재시도, 소진되면 오프라인 응답
5. 새 컨텍스트 + 감독 메시지 반환

생성기 관련 실패는 호출자에게 예외로 올라가지 않는다.
"""

import random
import time
from dataclasses import replace
from typing import Callable, Optional

from src.core.conversation.details import record_detail
from src.core.conversation.errors import GenerationError
from src.core.conversation.models import (
    ConversationContext,
    Message,
    MessageRole,
    new_message_id,
)
from src.core.conversation.personas import DirectorPersona
from src.core.conversation.stages import Stage
from src.core.conversation.transition import next_stage
from src.core.event_bus import ConversationEvent, EventBus
from src.core.event_types import EventTypes
from src.core.logging import get_logger
from src.services.offline_responses import OFFLINE_MODE_NOTICE, get_offline_reply
from src.services.scenario_generator import ScenarioGenerator
from src.services.scenario_types import GeneratorReply, GeneratorRequest

logger = get_logger(__name__)


class ResponseOrchestrator:
    """세션 하나의 응답 진행기. 오프라인 모드는 한 번 들어가면 유지된다."""

    SOURCE = "response_orchestrator"

    def __init__(
        self,
        generator: ScenarioGenerator,
        persona: DirectorPersona,
        event_bus: Optional[EventBus] = None,
        max_attempts: int = 3,
        backoff_base: float = 1.0,
        backoff_cap: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
        history_limit: Optional[int] = 20,
        history_tail: int = 8,
    ) -> None:
        self.generator = generator
        self.persona = persona
        self._bus = event_bus
        self.max_attempts = max(1, max_attempts)
        self.backoff_base = backoff_base
        self.backoff_cap = backoff_cap
        self._sleep = sleep
        self._rng = rng or random.Random()
        self.history_limit = history_limit
        self.history_tail = history_tail

        self.offline_mode: bool = False
        self.generator_calls: int = 0

    def backoff_delay(self, attempt: int) -> float:
        """attempt번째 시도가 실패한 뒤 기다릴 시간 (1부터)."""
        return min(self.backoff_base * (2 ** (attempt - 1)), self.backoff_cap)

    def advance_conversation(
        self,
        context: ConversationContext,
        user_text: str,
        turn_count: int,
        user_message_id: Optional[str] = None,
    ) -> tuple[ConversationContext, Message]:
        """대화 1턴 진행. context는 변경하지 않고 새 컨텍스트를 돌려준다.

        Args:
            context: 현재 대화 컨텍스트
            user_text: 사용자 입력
            turn_count: 사용자 메시지 추가 전까지의 누적 메시지 수
            user_message_id: 재전송 중복 제거용 id (없으면 새로 발급)

        Returns:
            (새 컨텍스트, 감독 메시지)
        """
        current = context.current_stage
        upcoming = next_stage(current, turn_count, user_text)
        detail_map = record_detail(context.detail_map, current, user_text)

        user_message = Message(
            id=user_message_id or new_message_id("user"),
            role=MessageRole.USER,
            content=user_text,
        )
        working = context.with_message(user_message, self.history_limit)

        request = GeneratorRequest(
            persona=self.persona,
            vignette=context.vignette,
            emotion=context.emotion,
            stage=upcoming,
            detail_map=detail_map,
            recent_messages=list(working.message_history[-self.history_tail :]),
            prior_draft_scenario=context.draft_scenario,
        )

        draft_scenario = context.draft_scenario
        final_scenario = context.final_scenario

        reply = None if self.offline_mode else self._generate_with_retry(request)
        if reply is not None:
            assistant = Message(
                id=new_message_id("assistant"),
                role=MessageRole.ASSISTANT,
                content=reply.message,
                choices=reply.to_choices(),
            )
            if reply.scenario_text:
                draft_scenario = reply.scenario_text
                if upcoming is Stage.FINAL:
                    final_scenario = reply.scenario_text
        else:
            assistant = self._offline_message(turn_count + 1)

        updated = replace(
            working,
            detail_map=detail_map,
            current_stage=upcoming,
            draft_scenario=draft_scenario,
            final_scenario=final_scenario,
        ).with_message(assistant, self.history_limit)

        if upcoming is not current:
            logger.info(f"Stage {current.value} → {upcoming.value} ({self.persona.value})")
        return updated, assistant

    # === 내부 ===

    def _generate_with_retry(self, request: GeneratorRequest) -> Optional[GeneratorReply]:
        """최대 max_attempts회 순차 시도. 모두 실패하면 오프라인 모드로 전환하고 None."""
        for attempt in range(1, self.max_attempts + 1):
            self.generator_calls += 1
            try:
                return self.generator.generate(request)
            except GenerationError as e:
                logger.warning(
                    f"Generator attempt {attempt}/{self.max_attempts} failed: {e}"
                )
            except Exception:
                logger.exception(
                    f"Unexpected error on generator attempt {attempt}/{self.max_attempts}"
                )
            if attempt < self.max_attempts:
                self._sleep(self.backoff_delay(attempt))

        self._enter_offline_mode()
        return None

    def _enter_offline_mode(self) -> None:
        if self.offline_mode:
            return
        self.offline_mode = True
        logger.warning(
            f"Generator retries exhausted, switching {self.persona.value} session to offline mode"
        )
        if self._bus is not None:
            self._bus.emit(
                ConversationEvent(
                    event_type=EventTypes.OFFLINE_MODE_ENTERED,
                    data={"persona": self.persona.value, "notice": OFFLINE_MODE_NOTICE},
                    source=self.SOURCE,
                )
            )

    def _offline_message(self, turn: int) -> Message:
        canned = get_offline_reply(self.persona, turn, self._rng)
        return Message(
            id=new_message_id("offline"),
            role=MessageRole.ASSISTANT,
            content=canned.message,
            choices=canned.choices,
        )
