"""대화 턴/시간 예산 관리

- 턴 카운터: 메시지(사용자/감독) 1건마다 +1. 단계 전이의 12턴 안전장치 입력.
- 카운트다운: 1초마다 -1, 0 도달 시 time_up 1회 발행.
- 연장: 고정 시간 추가, 최대 횟수 제한.
- 참여 마일스톤: 고정 턴 수 도달 시 1회 발행.
"""

from typing import Optional

from src.core.event_bus import ConversationEvent, EventBus
from src.core.event_types import EventTypes
from src.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIME_LIMIT = 600  # 10분
DEFAULT_EXTENSION_SECONDS = 180  # 3분
DEFAULT_MAX_EXTENSIONS = 3
DEFAULT_MILESTONE_TURNS = 20


class TurnBudgetTracker:
    """세션 하나의 턴 수와 남은 시간"""

    SOURCE = "budget_tracker"

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        time_limit: int = DEFAULT_TIME_LIMIT,
        extension_seconds: int = DEFAULT_EXTENSION_SECONDS,
        max_extensions: int = DEFAULT_MAX_EXTENSIONS,
        milestone_turns: int = DEFAULT_MILESTONE_TURNS,
    ) -> None:
        self._bus = event_bus
        self.time_limit = time_limit
        self.extension_seconds = extension_seconds
        self.max_extensions = max_extensions
        self.milestone_turns = milestone_turns

        self.turn_count: int = 0
        self.time_remaining: int = time_limit
        self.extension_count: int = 0
        self._time_up_fired: bool = False
        self._milestone_shown: bool = False

    # === 턴 ===

    def record_message(self) -> int:
        """메시지 1건 추가. 갱신된 턴 수 반환."""
        self.turn_count += 1
        if not self._milestone_shown and self.turn_count >= self.milestone_turns:
            self._milestone_shown = True
            logger.info("Engagement milestone reached at turn %d", self.turn_count)
            self._emit(EventTypes.ENGAGEMENT_MILESTONE, {"turn_count": self.turn_count})
        return self.turn_count

    def restore_turns(self, turn_count: int) -> None:
        """복구 시 턴 수 복원. 이미 지난 마일스톤은 다시 발행하지 않는다."""
        self.turn_count = max(0, turn_count)
        self._milestone_shown = self.turn_count >= self.milestone_turns

    @property
    def milestone_shown(self) -> bool:
        return self._milestone_shown

    # === 시간 ===

    def tick(self, seconds: int = 1) -> int:
        """경과 초만큼 1초 단위로 감소. 남은 시간 반환."""
        for _ in range(max(0, seconds)):
            if self.time_remaining <= 0:
                break
            self.time_remaining -= 1
        if self.time_remaining <= 0 and not self._time_up_fired:
            self._time_up_fired = True
            logger.info("Chat time is up")
            self._emit(EventTypes.TIME_UP, {"extension_count": self.extension_count})
        return self.time_remaining

    def extend(self) -> bool:
        """시간 연장. 한도 초과면 아무 것도 하지 않고 False."""
        if self.extension_count >= self.max_extensions:
            return False
        self.time_remaining += self.extension_seconds
        self.extension_count += 1
        if self.time_remaining > 0:
            self._time_up_fired = False
        logger.info(
            "Chat time extended (%d/%d, remaining=%ds)",
            self.extension_count,
            self.max_extensions,
            self.time_remaining,
        )
        return True

    @property
    def time_up(self) -> bool:
        return self._time_up_fired

    @property
    def extensions_left(self) -> int:
        return self.max_extensions - self.extension_count

    def _emit(self, event_type: str, data: dict) -> None:
        if self._bus is None:
            return
        self._bus.emit(
            ConversationEvent(event_type=event_type, data=data, source=self.SOURCE)
        )
