"""detail 단계 입력 누적"""

from src.core.conversation.stages import Stage, detail_index, parse_stage


def detail_key(stage: Stage | str) -> str | None:
    """detail_N 단계의 누적 키. 그 외 단계는 None."""
    stage = parse_stage(stage)
    if detail_index(stage) is None:
        return None
    return stage.value


def record_detail(
    detail_map: dict[str, str], stage: Stage | str, text: str
) -> dict[str, str]:
    """detail_N 단계에서 받은 텍스트를 새 dict에 기록해 반환.

    다른 단계에서는 복사본만 반환한다. 같은 키 재진입은 덮어쓴다.
    키는 삭제하지 않으며 호출자의 dict는 건드리지 않는다.
    """
    updated = dict(detail_map)
    key = detail_key(stage)
    if key is not None:
        updated[key] = text
    return updated
