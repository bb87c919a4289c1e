"""생성기 응답 디코드

파싱 단계:
1. 전체 본문을 JSON으로 시도
2. ```json ... ``` 블록 하나를 꺼내서 시도
3. GeneratorReply 스키마 검증
어느 단계든 실패하면 DecodeError (재시도 경로로 들어간다).
"""

import json
import logging
import re

from pydantic import ValidationError

from src.core.conversation.errors import DecodeError
from src.services.scenario_types import GeneratorReply

logger = logging.getLogger(__name__)

_JSON_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


def _try_parse_json(text: str) -> dict | None:
    """JSON 객체 파싱 시도. 실패 또는 객체가 아니면 None."""
    try:
        result = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    if isinstance(result, dict):
        return result
    return None


def _extract_json_block(text: str) -> str | None:
    match = _JSON_BLOCK.search(text)
    if match:
        return match.group(1)
    return None


def decode_reply(raw: str | None) -> GeneratorReply:
    """원문 → GeneratorReply.

    Raises:
        DecodeError: 빈 본문, JSON 아님, 스키마 위반(message 누락, choices 개수 등)
    """
    if raw is None or not raw.strip():
        raise DecodeError("Empty generator response")

    parsed = _try_parse_json(raw.strip())
    if parsed is None:
        block = _extract_json_block(raw)
        if block is not None:
            parsed = _try_parse_json(block)
    if parsed is None:
        raise DecodeError(f"Generator response is not a JSON object: {raw[:80]!r}")

    try:
        return GeneratorReply.model_validate(parsed)
    except ValidationError as e:
        logger.debug("Generator reply failed schema validation: %s", e)
        raise DecodeError(f"Generator reply failed schema validation: {e}") from e
