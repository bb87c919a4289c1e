"""대화 도메인 모델 테스트"""

import pytest

from src.core.conversation.errors import InvalidStateError
from src.core.conversation.models import (
    DEFAULT_VIGNETTES,
    Choice,
    ConversationContext,
    EmotionTag,
    Message,
    MessageRole,
    append_message,
)
from src.core.conversation.stages import Stage


def _msg(message_id: str, content: str = "안녕하세요") -> Message:
    return Message(id=message_id, role=MessageRole.USER, content=content)


class TestAppendMessage:
    def test_appends_new_message(self):
        history = append_message((), _msg("m1"))
        assert [m.id for m in history] == ["m1"]

    def test_duplicate_id_leaves_history_unchanged(self):
        history = (_msg("m1"), _msg("m2"))
        again = append_message(history, _msg("m1", content="다른 내용"))
        assert again == history
        assert again[0].content == "안녕하세요"

    def test_limit_keeps_most_recent(self):
        history = ()
        for i in range(5):
            history = append_message(history, _msg(f"m{i}"), limit=3)
        assert [m.id for m in history] == ["m2", "m3", "m4"]


class TestConversationContext:
    def test_create_uses_placeholder_for_blank_vignette(self):
        ctx = ConversationContext.create("sadness", "   ")
        assert ctx.vignette == DEFAULT_VIGNETTES[EmotionTag.SADNESS]
        assert ctx.current_stage is Stage.INITIAL
        assert ctx.detail_map == {}

    def test_create_keeps_vignette(self):
        ctx = ConversationContext.create(EmotionTag.JOY, " 졸업식 날 ")
        assert ctx.vignette == "졸업식 날"

    def test_unknown_emotion_rejected(self):
        with pytest.raises(InvalidStateError):
            ConversationContext.create("boredom")

    def test_unknown_detail_key_rejected(self):
        with pytest.raises(InvalidStateError):
            ConversationContext(vignette="v", emotion=EmotionTag.JOY, detail_map={"detail_9": "x"})

    def test_final_scenario_requires_final_stage(self):
        with pytest.raises(InvalidStateError):
            ConversationContext(
                vignette="v",
                emotion=EmotionTag.JOY,
                current_stage=Stage.DRAFT,
                final_scenario="S#1.",
            )

    def test_with_message_returns_new_context(self):
        ctx = ConversationContext.create(EmotionTag.ANGER)
        updated = ctx.with_message(_msg("m1"))
        assert ctx.message_history == ()
        assert len(updated.message_history) == 1

    def test_dict_round_trip(self):
        ctx = ConversationContext(
            vignette="첫 출근 날",
            emotion=EmotionTag.PLEASURE,
            detail_map={"detail_1": "지하철", "detail_2": "팀장님"},
            current_stage=Stage.FINAL,
            message_history=(
                Message(
                    id="a1",
                    role=MessageRole.ASSISTANT,
                    content="좋네요",
                    choices=(Choice(id="1", text="네", icon="🎬"),),
                ),
            ),
            draft_scenario="S#1. 초안",
            final_scenario="S#1. 완성",
        )
        assert ConversationContext.from_dict(ctx.to_dict()) == ctx

    def test_from_dict_rejects_corrupt_stage(self):
        data = ConversationContext.create(EmotionTag.JOY).to_dict()
        data["current_stage"] = "detail_7"
        with pytest.raises(InvalidStateError):
            ConversationContext.from_dict(data)
