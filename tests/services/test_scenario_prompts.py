"""프롬프트 빌더 테스트"""

from src.core.conversation.models import EmotionTag, Message, MessageRole
from src.core.conversation.personas import DirectorPersona
from src.core.conversation.stages import Stage
from src.services.scenario_prompts import STAGE_TOKEN_MAP, PromptBuilder
from src.services.scenario_types import SCENARIO_MARKER, GeneratorRequest


def _request(stage: Stage, **kwargs) -> GeneratorRequest:
    return GeneratorRequest(
        persona=DirectorPersona.NOLAN,
        vignette="할머니와 마지막으로 본 바다",
        emotion=EmotionTag.SADNESS,
        stage=stage,
        **kwargs,
    )


class TestPromptBuilder:
    def test_system_prompt_uses_persona_voice(self):
        built = PromptBuilder().build(_request(Stage.DETAIL_1))
        assert "크리스토퍼 놀란" in built.system_prompt
        assert "인셉션" in built.system_prompt
        assert '"scenario"' not in built.system_prompt
        assert built.expect_json is True
        assert built.max_tokens == STAGE_TOKEN_MAP[Stage.DETAIL_1]

    def test_user_prompt_carries_story_and_details(self):
        built = PromptBuilder().build(
            _request(Stage.DETAIL_3, detail_map={"detail_1": "겨울", "detail_2": "할머니"})
        )
        assert "할머니와 마지막으로 본 바다" in built.user_prompt
        assert "슬픔" in built.user_prompt
        assert "- detail_1: 겨울" in built.user_prompt
        assert "[현재 단계: detail_3]" in built.user_prompt
        assert SCENARIO_MARKER not in built.user_prompt

    def test_scenario_stages_ask_for_scenario(self):
        for stage in (Stage.DRAFT, Stage.FEEDBACK, Stage.FINAL):
            built = PromptBuilder().build(_request(stage))
            assert SCENARIO_MARKER in built.user_prompt
            assert '"scenario"' in built.system_prompt

    def test_prior_draft_included(self):
        built = PromptBuilder().build(_request(Stage.FEEDBACK, prior_draft_scenario="S#1. 바다"))
        assert "[이전 시나리오 초안]" in built.user_prompt
        assert "S#1. 바다" in built.user_prompt

    def test_history_tail_is_bounded(self):
        messages = [
            Message(id=f"m{i}", role=MessageRole.USER, content=f"대사{i}") for i in range(10)
        ]
        built = PromptBuilder(history_tail=3).build(
            _request(Stage.DETAIL_2, recent_messages=messages)
        )
        assert "사용자: 대사9" in built.user_prompt
        assert "대사6" not in built.user_prompt
