"""감독 응답 생성기. 모든 LLM 호출의 단일 관문

재시도와 오프라인 폴백은 ResponseOrchestrator가 담당한다.
여기서는 1회 호출 + 디코드만 하고 실패는 GenerationError로 올린다.
"""

from src.core.conversation.errors import GenerationError
from src.core.logging import get_logger
from src.services.ai.base import AIProvider
from src.services.reply_parser import decode_reply
from src.services.scenario_prompts import PromptBuilder
from src.services.scenario_types import GeneratorReply, GeneratorRequest

logger = get_logger(__name__)


class ScenarioGenerator:
    """GeneratorRequest → GeneratorReply"""

    def __init__(
        self,
        ai_provider: AIProvider,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.ai = ai_provider
        self._prompt_builder = prompt_builder or PromptBuilder()

    def generate(self, request: GeneratorRequest) -> GeneratorReply:
        """생성기 1회 호출.

        Raises:
            GenerationError: 프로바이더 미설정/호출 실패
            DecodeError: 응답이 스키마에 맞지 않음
        """
        if not self.ai.is_available():
            raise GenerationError(f"AI provider '{self.ai.name}' is not available")

        built = self._prompt_builder.build(request)
        try:
            raw = self.ai.generate(
                built.user_prompt,
                system_prompt=built.system_prompt,
                max_tokens=built.max_tokens,
                expect_json=built.expect_json,
            )
        except Exception as e:
            raise GenerationError(f"{self.ai.name} call failed: {e}") from e

        reply = decode_reply(raw)
        if reply.error:
            logger.warning("Generator reported error alongside reply: %s", reply.error)
        return reply

