"""대화 엔진 예외 계층"""


class ConversationError(Exception):
    """대화 엔진 공통 예외"""


class InvalidStateError(ConversationError, ValueError):
    """7단계 열거 밖의 단계(또는 미지의 감독/감정) 값이 코어에 도달함"""


class GenerationError(ConversationError):
    """생성기 일시 실패 (네트워크, 타임아웃, 응답 형식 오류). 재시도 대상."""


class DecodeError(GenerationError):
    """생성기 응답이 스키마에 맞지 않음. 재시도 경로는 GenerationError와 동일."""


class SessionBusyError(ConversationError):
    """같은 세션에서 응답 대기 중에 새 전송이 들어옴"""


class StaleSessionError(ConversationError):
    """응답 대기 중 세션이 리셋되어 늦은 응답을 폐기함"""


class SessionNotFoundError(ConversationError):
    """등록되지 않은 세션 id"""
