"""대화 단계 모델

initial → detail_1 → detail_2 → detail_3 → draft → feedback → final
전이는 단계를 건너뛸 수 있다. 순서는 "한 단계 전진" 폴백에만 쓰인다.
"""

from enum import Enum

from src.core.conversation.errors import InvalidStateError


class Stage(str, Enum):
    """대화 단계"""

    INITIAL = "initial"
    DETAIL_1 = "detail_1"
    DETAIL_2 = "detail_2"
    DETAIL_3 = "detail_3"
    DRAFT = "draft"
    FEEDBACK = "feedback"
    FINAL = "final"


STAGE_ORDER: tuple[Stage, ...] = (
    Stage.INITIAL,
    Stage.DETAIL_1,
    Stage.DETAIL_2,
    Stage.DETAIL_3,
    Stage.DRAFT,
    Stage.FEEDBACK,
    Stage.FINAL,
)

DETAIL_STAGES: tuple[Stage, ...] = (Stage.DETAIL_1, Stage.DETAIL_2, Stage.DETAIL_3)

# 시나리오 본문을 요청하는 단계
SCENARIO_STAGES = frozenset({Stage.DRAFT, Stage.FEEDBACK, Stage.FINAL})


def parse_stage(value: object) -> Stage:
    """문자열/Stage → Stage. 열거 밖 값은 InvalidStateError."""
    if isinstance(value, Stage):
        return value
    try:
        return Stage(value)
    except ValueError as e:
        raise InvalidStateError(f"Unknown conversation stage: {value!r}") from e


def detail_index(stage: Stage) -> int | None:
    """detail_N → N, 그 외 None"""
    if stage in DETAIL_STAGES:
        return DETAIL_STAGES.index(stage) + 1
    return None


def detail_stage(index: int) -> Stage:
    """N → detail_N (1~3)"""
    if not 1 <= index <= len(DETAIL_STAGES):
        raise InvalidStateError(f"Detail index out of range: {index}")
    return DETAIL_STAGES[index - 1]


def advance_one(stage: Stage) -> Stage:
    """순서상 다음 단계. final은 흡수 상태."""
    stage = parse_stage(stage)
    idx = STAGE_ORDER.index(stage)
    return STAGE_ORDER[min(idx + 1, len(STAGE_ORDER) - 1)]
