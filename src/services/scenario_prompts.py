"""단계별 감독 응답 프롬프트 빌더"""

import logging

from src.core.conversation.models import MessageRole
from src.core.conversation.personas import get_profile
from src.core.conversation.stages import SCENARIO_STAGES, Stage
from src.services.scenario_types import SCENARIO_MARKER, BuiltPrompt, GeneratorRequest

logger = logging.getLogger(__name__)

STAGE_TOKEN_MAP: dict[Stage, int] = {
    Stage.INITIAL: 500,
    Stage.DETAIL_1: 500,
    Stage.DETAIL_2: 500,
    Stage.DETAIL_3: 500,
    Stage.DRAFT: 1500,
    Stage.FEEDBACK: 1500,
    Stage.FINAL: 2048,
}

EMOTION_LABELS = {
    "joy": "기쁨(喜)",
    "anger": "분노(怒)",
    "sadness": "슬픔(哀)",
    "pleasure": "즐거움(樂)",
}

# 단계별 과제 지시
STAGE_TASKS: dict[Stage, str] = {
    Stage.INITIAL: "사용자의 사연에 공감하고, 그날의 상황을 더 들려달라고 자연스럽게 요청하세요.",
    Stage.DETAIL_1: "장면의 배경(장소, 시간, 날씨)을 구체적으로 물어보세요.",
    Stage.DETAIL_2: "그 순간 함께 있던 인물과 그들의 반응을 물어보세요.",
    Stage.DETAIL_3: "그때 사용자가 느낀 감정과 마음속 생각을 물어보세요.",
    Stage.DRAFT: (
        "지금까지 모은 이야기로 짧은 영화 시나리오 초안을 작성하고, "
        "마음에 드는지 사용자에게 물어보세요."
    ),
    Stage.FEEDBACK: (
        "사용자의 의견을 반영해 시나리오 초안을 고치고, 무엇이 바뀌었는지 짧게 설명하세요."
    ),
    Stage.FINAL: "최종 시나리오를 완성하고, 감독으로서 짧은 소감을 남기세요.",
}

SYSTEM_PROMPT_TEMPLATE = """\
{voice}

대표작: {films}
핵심 가치관: {quote}

출력 형식:
반드시 아래 JSON 하나만 출력하세요. 다른 텍스트는 넣지 마세요.

{{
  "message": "감독의 답변",
  "choices": [
    {{"id": "1", "text": "사용자가 보낼 수 있는 짧은 답 1", "icon": "🎬"}},
    {{"id": "2", "text": "사용자가 보낼 수 있는 짧은 답 2", "icon": "💭"}},
    {{"id": "3", "text": "사용자가 보낼 수 있는 짧은 답 3", "icon": "✨"}}
  ]{scenario_field}
}}

규칙:
- choices는 정확히 3개, 모두 한국어
- 사용자의 실제 사연을 벗어나는 사실을 지어내지 마세요"""

SCENARIO_FIELD = ',\n  "scenario": "장면 번호(S#)가 붙은 시나리오 본문"'


class PromptBuilder:
    """GeneratorRequest → BuiltPrompt"""

    def __init__(self, history_tail: int = 8):
        self._history_tail = history_tail

    def build(self, request: GeneratorRequest) -> BuiltPrompt:
        profile = get_profile(request.persona)
        wants_scenario = request.stage in SCENARIO_STAGES

        system_prompt = SYSTEM_PROMPT_TEMPLATE.format(
            voice=profile.voice,
            films=", ".join(profile.films),
            quote=profile.quote,
            scenario_field=SCENARIO_FIELD if wants_scenario else "",
        )
        user_prompt = self._build_user_prompt(request, profile.name_ko, wants_scenario)
        return BuiltPrompt(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            max_tokens=STAGE_TOKEN_MAP[request.stage],
            expect_json=True,
        )

    def _build_user_prompt(
        self, request: GeneratorRequest, director_name: str, wants_scenario: bool
    ) -> str:
        sections = [
            "[사용자의 사연]",
            f"감정: {EMOTION_LABELS.get(request.emotion.value, request.emotion.value)}",
            request.vignette,
        ]

        if request.detail_map:
            sections.append("")
            sections.append("[지금까지 들은 세부 이야기]")
            for key in sorted(request.detail_map):
                sections.append(f"- {key}: {request.detail_map[key]}")

        if request.prior_draft_scenario:
            sections.append("")
            sections.append("[이전 시나리오 초안]")
            sections.append(request.prior_draft_scenario)

        history = request.recent_messages[-self._history_tail :]
        if history:
            sections.append("")
            sections.append("[최근 대화]")
            for message in history:
                if message.role is MessageRole.USER:
                    speaker = "사용자"
                elif message.role is MessageRole.ASSISTANT:
                    speaker = director_name
                else:
                    speaker = "시스템"
                sections.append(f"{speaker}: {message.content}")

        sections.append("")
        sections.append(f"[현재 단계: {request.stage.value}]")
        sections.append(STAGE_TASKS[request.stage])
        if wants_scenario:
            sections.append(f"{SCENARIO_MARKER} scenario 필드에 시나리오 전문을 넣으세요.")

        return "\n".join(sections)
