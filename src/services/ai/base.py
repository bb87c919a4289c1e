"""감독 응답 백엔드 인터페이스"""

from abc import ABC, abstractmethod
from typing import Optional


class AIProvider(ABC):
    """LLM 백엔드 공통 인터페이스

    generate()는 원문 문자열만 돌려준다. 디코드/검증은 reply_parser 몫.
    실패는 예외로 올리고, ScenarioGenerator가 GenerationError로 감싼다.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """백엔드 이름 (로그, /health 노출용)"""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """키/모델이 설정되어 호출 가능한지"""
        ...

    @abstractmethod
    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 1000,
        expect_json: bool = False,
    ) -> str:
        """프롬프트 1회 호출.

        Args:
            prompt: 사용자 프롬프트
            system_prompt: 감독 말투/출력 형식 지시
            max_tokens: 응답 최대 토큰
            expect_json: 지원하는 백엔드면 JSON 본문만 요청
        """
        ...
