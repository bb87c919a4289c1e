"""시나리오 생성기 경계 타입

요청은 dataclass, 응답은 pydantic 스키마로 엄격하게 디코드한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from src.core.conversation.models import Choice, EmotionTag, Message
from src.core.conversation.personas import DirectorPersona
from src.core.conversation.stages import Stage

# 프롬프트에 이 표식이 있으면 응답에 시나리오 본문을 요구한다
SCENARIO_MARKER = "[SCENARIO]"


@dataclass
class BuiltPrompt:
    """조립 완료된 프롬프트"""

    system_prompt: str
    user_prompt: str
    max_tokens: int
    expect_json: bool = True


@dataclass
class GeneratorRequest:
    """ResponseOrchestrator가 조립해서 생성기에 넘기는 요청"""

    persona: DirectorPersona
    vignette: str
    emotion: EmotionTag
    stage: Stage
    detail_map: dict[str, str] = field(default_factory=dict)
    recent_messages: list[Message] = field(default_factory=list)
    prior_draft_scenario: Optional[str] = None


class ChoicePayload(BaseModel):
    id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    icon: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value):
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("text")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("choice text is blank")
        return stripped


class GeneratorReply(BaseModel):
    """생성기 응답 스키마

    message는 필수. choices는 없거나 정확히 3개.
    """

    model_config = ConfigDict(extra="ignore")

    message: str
    choices: Optional[list[ChoicePayload]] = None
    scenario_text: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("scenario", "scenarioText", "scenario_text"),
    )
    error: Optional[str] = None

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("message is blank")
        return stripped

    @field_validator("choices")
    @classmethod
    def _exactly_three(cls, value):
        if value is not None and len(value) != 3:
            raise ValueError(f"expected exactly 3 choices, got {len(value)}")
        return value

    @field_validator("scenario_text")
    @classmethod
    def _blank_scenario_is_none(cls, value):
        if value is not None and not value.strip():
            return None
        return value

    def to_choices(self) -> tuple[Choice, ...]:
        if not self.choices:
            return ()
        return tuple(Choice(id=c.id, text=c.text, icon=c.icon) for c in self.choices)
