"""단계 전이 정책 (순수 함수)

입력: 현재 단계, 누적 메시지 수, 마지막 사용자 메시지.
길이 임계값과 키워드 집합으로 다음 단계를 결정한다.
"""

import logging

from src.core.conversation.errors import InvalidStateError
from src.core.conversation.stages import (
    Stage,
    detail_index,
    detail_stage,
    parse_stage,
)

logger = logging.getLogger(__name__)

# --- 임계값 ---
RICH_INITIAL_LENGTH = 100  # initial에서 detail_1을 건너뛰는 길이
LONG_DETAIL_LENGTH = 150  # detail 단계에서 두 칸 전진하는 길이
LONG_FEEDBACK_LENGTH = 50  # draft에서 수정 요청으로 보는 길이
FORCED_DRAFT_TURNS = 12  # 이 메시지 수 이후 detail 단계는 무조건 draft로

# "이야기/경험"을 뜻하는 단어
NARRATIVE_KEYWORDS = frozenset(
    [
        "이야기",
        "경험",
        "사연",
        "추억",
        "기억",
        "에피소드",
        "story",
        "experience",
    ]
)

# draft 승인 표현
POSITIVE_KEYWORDS = frozenset(
    [
        "좋아",
        "좋네",
        "좋습니다",
        "완벽",
        "마음에 들",
        "최고",
        "훌륭",
        "멋져",
        "멋지",
        "괜찮",
        "그대로",
        "승인",
        "perfect",
        "great",
        "good",
        "love it",
    ]
)

# draft 수정 요청 표현
NEGATIVE_KEYWORDS = frozenset(
    [
        "아니",
        "싫어",
        "별로",
        "수정",
        "바꿔",
        "바꾸",
        "고쳐",
        "다시",
        "추가",
        "빼",
        "부족",
        "아쉬",
        "이상해",
        "change",
        "revise",
        "not ",
    ]
)


def _contains_any(text: str, keywords: frozenset[str]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def has_narrative_keyword(text: str) -> bool:
    return _contains_any(text, NARRATIVE_KEYWORDS)


def classify_feedback(text: str) -> tuple[bool, bool]:
    """(positive 매칭, negative 매칭). 공백뿐인 입력은 둘 다 False."""
    stripped = text.strip()
    if not stripped:
        return (False, False)
    return (
        _contains_any(stripped, POSITIVE_KEYWORDS),
        _contains_any(stripped, NEGATIVE_KEYWORDS),
    )


def next_stage(current: Stage | str, turn_count: int, latest_user_text: str) -> Stage:
    """다음 대화 단계 계산.

    - initial: 100자 초과 또는 이야기 키워드 → detail_2, 그 외 detail_1
    - detail_N: 150자 초과면 두 칸, 아니면 한 칸. 3 이상이거나 12턴 이상 → draft
    - draft: 긍정만 있으면 final, 그 외 feedback
    - feedback: 항상 final
    - final: 흡수 상태

    Raises:
        InvalidStateError: current가 7단계 밖의 값일 때
    """
    stage = parse_stage(current)
    text = latest_user_text or ""

    if stage is Stage.INITIAL:
        if len(text) > RICH_INITIAL_LENGTH or has_narrative_keyword(text):
            return Stage.DETAIL_2
        return Stage.DETAIL_1

    index = detail_index(stage)
    if index is not None:
        detail_level = 2 if len(text) > LONG_DETAIL_LENGTH else 1
        next_detail = min(index + detail_level, 3)
        if next_detail >= 3 or turn_count >= FORCED_DRAFT_TURNS:
            return Stage.DRAFT
        return detail_stage(next_detail)

    if stage is Stage.DRAFT:
        positive, negative = classify_feedback(text)
        if positive and not negative:
            return Stage.FINAL
        # 짧고 중립적인 답도 승인으로 보지 않고 한 번 더 피드백을 받는다
        return Stage.FEEDBACK

    if stage is Stage.FEEDBACK:
        return Stage.FINAL

    if stage is Stage.FINAL:
        return Stage.FINAL

    raise InvalidStateError(f"Unhandled stage: {stage!r}")
