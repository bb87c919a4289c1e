"""API request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from src.core.conversation.models import EmotionTag
from src.core.conversation.personas import DirectorPersona
from src.core.conversation.stages import Stage


# === Request Schemas ===


class CreateSessionRequest(BaseModel):
    """감독 선택 → 세션 시작 요청"""

    director_id: DirectorPersona = Field(..., description="감독 id (bong, nolan, ...)")
    emotion: EmotionTag = Field(..., description="사연 감정: joy, anger, sadness, pleasure")
    vignette: Optional[str] = Field(
        default=None, max_length=2000, description="사연 본문. 비우면 감정별 기본 사연"
    )
    session_id: Optional[str] = Field(
        default=None, min_length=1, max_length=64, description="이전 세션 id (복구 시도)"
    )


class SendMessageRequest(BaseModel):
    """사용자 메시지 전송 요청"""

    text: str = Field(..., min_length=1, max_length=4000, description="메시지 본문")
    message_id: Optional[str] = Field(
        default=None, max_length=64, description="재전송 중복 제거용 id"
    )


class TickRequest(BaseModel):
    """카운트다운 진행 요청"""

    seconds: int = Field(default=1, ge=0, le=3600, description="경과 초")


# === Response Schemas ===


class ChoiceInfo(BaseModel):
    id: str
    text: str
    icon: Optional[str] = None


class MessageInfo(BaseModel):
    """메시지 1건"""

    id: str
    role: str
    content: str
    timestamp: str
    choices: list[ChoiceInfo] = []


class DirectorInfo(BaseModel):
    """감독 카탈로그 항목"""

    director_id: DirectorPersona
    name: str
    name_ko: str
    films: list[str]
    quote: str
    emoji: str


class SessionStateResponse(BaseModel):
    """세션 상태 응답"""

    session_id: str
    director_id: DirectorPersona
    emotion: EmotionTag
    vignette: str
    stage: Stage
    phase: str
    offline_mode: bool
    turn_count: int
    time_remaining: int
    time_up: bool
    extensions_left: int
    detail_map: dict[str, str] = {}
    draft_scenario: Optional[str] = None
    final_scenario: Optional[str] = None
    messages: list[MessageInfo] = []


class SendMessageResponse(BaseModel):
    """메시지 전송 응답"""

    success: bool
    reply: MessageInfo
    state: SessionStateResponse


class TickResponse(BaseModel):
    time_remaining: int
    time_up: bool


class ExtendResponse(BaseModel):
    extended: bool
    time_remaining: int
    extensions_left: int


class RecoverResponse(BaseModel):
    """스냅샷 복구 응답. 복구할 것이 없으면 recovered=False"""

    recovered: bool
    state: SessionStateResponse


class ErrorResponse(BaseModel):
    """에러 응답"""

    success: bool = False
    error: str
    detail: Optional[str] = None
