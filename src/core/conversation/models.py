"""대화 도메인 모델 (DB 무관)

Message / Choice / ConversationContext와 직렬화.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from src.core.conversation.errors import InvalidStateError
from src.core.conversation.stages import DETAIL_STAGES, Stage, parse_stage

DETAIL_KEYS = frozenset(s.value for s in DETAIL_STAGES)


class EmotionTag(str, Enum):
    """사연에 붙는 감정 (세션당 하나, 불변)"""

    JOY = "joy"
    ANGER = "anger"
    SADNESS = "sadness"
    PLEASURE = "pleasure"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


# 사연이 비어 있을 때 쓰는 기본 사연
DEFAULT_VIGNETTES: dict[EmotionTag, str] = {
    EmotionTag.JOY: "오랜만에 만난 친구와 밤새 웃으며 이야기를 나눈 날",
    EmotionTag.ANGER: "열심히 준비한 발표를 남이 자기 공으로 가로챈 날",
    EmotionTag.SADNESS: "어릴 적 함께 자란 강아지와 작별한 날",
    EmotionTag.PLEASURE: "혼자 떠난 여행지에서 우연히 본 노을",
}


def parse_emotion(value: object) -> EmotionTag:
    if isinstance(value, EmotionTag):
        return value
    try:
        return EmotionTag(value)
    except ValueError as e:
        raise InvalidStateError(f"Unknown emotion tag: {value!r}") from e


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_message_id(prefix: str = "msg") -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


@dataclass(frozen=True)
class Choice:
    """사용자가 눌러서 그대로 보낼 수 있는 후보 답변"""

    id: str
    text: str
    icon: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "icon": self.icon}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Choice:
        return cls(id=str(data["id"]), text=data["text"], icon=data.get("icon"))


@dataclass(frozen=True)
class Message:
    """대화 메시지 1건"""

    id: str
    role: MessageRole
    content: str
    timestamp: datetime = field(default_factory=utcnow)
    choices: tuple[Choice, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "choices": [c.to_dict() for c in self.choices],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        return cls(
            id=data["id"],
            role=MessageRole(data["role"]),
            content=data["content"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            choices=tuple(Choice.from_dict(c) for c in data.get("choices") or []),
        )


def append_message(
    messages: tuple[Message, ...], message: Message, limit: int | None = None
) -> tuple[Message, ...]:
    """id 중복이면 그대로 반환. limit이 있으면 최근 limit개만 남긴다."""
    if any(m.id == message.id for m in messages):
        return messages
    appended = messages + (message,)
    if limit is not None and len(appended) > limit:
        appended = appended[-limit:]
    return appended


@dataclass(frozen=True)
class ConversationContext:
    """세션의 대화 컨텍스트 (직렬화 가능)

    message_history는 전체 로그가 아닌 최근 구간 뷰다.
    final_scenario가 있으면 current_stage는 final이다.
    """

    vignette: str
    emotion: EmotionTag
    detail_map: dict[str, str] = field(default_factory=dict)
    current_stage: Stage = Stage.INITIAL
    message_history: tuple[Message, ...] = ()
    draft_scenario: Optional[str] = None
    final_scenario: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "current_stage", parse_stage(self.current_stage))
        object.__setattr__(self, "emotion", parse_emotion(self.emotion))
        unknown = set(self.detail_map) - DETAIL_KEYS
        if unknown:
            raise InvalidStateError(f"Unknown detail keys: {sorted(unknown)}")
        if self.final_scenario is not None and self.current_stage is not Stage.FINAL:
            raise InvalidStateError("final_scenario requires the final stage")

    @classmethod
    def create(cls, emotion: EmotionTag | str, vignette: str | None = None) -> ConversationContext:
        """감독 선택 시점의 새 컨텍스트. 사연이 비면 기본 사연을 쓴다."""
        tag = parse_emotion(emotion)
        text = (vignette or "").strip() or DEFAULT_VIGNETTES[tag]
        return cls(vignette=text, emotion=tag)

    def with_message(self, message: Message, limit: int | None = None) -> ConversationContext:
        return replace(
            self, message_history=append_message(self.message_history, message, limit)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "vignette": self.vignette,
            "emotion": self.emotion.value,
            "detail_map": dict(self.detail_map),
            "current_stage": self.current_stage.value,
            "message_history": [m.to_dict() for m in self.message_history],
            "draft_scenario": self.draft_scenario,
            "final_scenario": self.final_scenario,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationContext:
        """Raises InvalidStateError: 단계/감정 값이 손상된 경우"""
        return cls(
            vignette=data["vignette"],
            emotion=parse_emotion(data["emotion"]),
            detail_map=dict(data.get("detail_map") or {}),
            current_stage=parse_stage(data["current_stage"]),
            message_history=tuple(
                Message.from_dict(m) for m in data.get("message_history") or []
            ),
            draft_scenario=data.get("draft_scenario"),
            final_scenario=data.get("final_scenario"),
        )
