"""대화 단계 엔진 Core 패키지

DB/네트워크 무관 순수 Python 도메인 모델 + 단계 전이/누적/예산 로직.
"""

from src.core.conversation.budget import TurnBudgetTracker
from src.core.conversation.details import record_detail
from src.core.conversation.errors import (
    ConversationError,
    DecodeError,
    GenerationError,
    InvalidStateError,
    SessionBusyError,
    SessionNotFoundError,
    StaleSessionError,
)
from src.core.conversation.models import (
    DEFAULT_VIGNETTES,
    Choice,
    ConversationContext,
    EmotionTag,
    Message,
    MessageRole,
    append_message,
)
from src.core.conversation.personas import (
    PERSONA_PROFILES,
    DirectorPersona,
    PersonaProfile,
    get_profile,
    parse_persona,
)
from src.core.conversation.stages import STAGE_ORDER, Stage, advance_one, parse_stage
from src.core.conversation.transition import FORCED_DRAFT_TURNS, next_stage

__all__ = [
    "TurnBudgetTracker",
    "record_detail",
    "ConversationError",
    "DecodeError",
    "GenerationError",
    "InvalidStateError",
    "SessionBusyError",
    "SessionNotFoundError",
    "StaleSessionError",
    "DEFAULT_VIGNETTES",
    "Choice",
    "ConversationContext",
    "EmotionTag",
    "Message",
    "MessageRole",
    "append_message",
    "PERSONA_PROFILES",
    "DirectorPersona",
    "PersonaProfile",
    "get_profile",
    "parse_persona",
    "STAGE_ORDER",
    "Stage",
    "advance_one",
    "parse_stage",
    "FORCED_DRAFT_TURNS",
    "next_stage",
]
