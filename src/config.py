"""Application configuration loaded from environment variables and .env file."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DATABASE_URL: str = "sqlite:///./dev.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # AI Provider settings
    AI_PROVIDER: str = "mock"
    AI_API_KEY: Optional[str] = None
    AI_MODEL: Optional[str] = None

    # 생성기 재시도
    GENERATOR_MAX_ATTEMPTS: int = 3
    GENERATOR_BACKOFF_BASE: float = 1.0
    GENERATOR_BACKOFF_CAP: float = 5.0

    # 세션 저장
    SESSION_EXPIRY_SECONDS: int = 30 * 60
    PERSIST_DEBOUNCE_SECONDS: float = 2.0

    # 턴/시간 예산
    CHAT_TIME_LIMIT_SECONDS: int = 600
    TIME_EXTENSION_SECONDS: int = 180
    MAX_TIME_EXTENSIONS: int = 3
    ENGAGEMENT_MILESTONE_TURNS: int = 20

    # 대화 이력
    HISTORY_VIEW_LIMIT: int = 20
    GENERATOR_HISTORY_TAIL: int = 8


settings = Settings()
