"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.api.chat import router as chat_router
from src.api.health import router as health_router
from src.config import settings
from src.core.logging import get_logger, setup_logging
from src.db.database import SessionLocal, engine as db_engine
from src.db.models import Base
from src.services.ai import get_ai_provider
from src.services.chat_session import ChatSessionOptions
from src.services.kv_store import SqlKeyValueStore
from src.services.scenario_generator import ScenarioGenerator
from src.services.scenario_prompts import PromptBuilder
from src.services.session_registry import SessionRegistry

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # DB 테이블 생성
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=db_engine)
    logger.info("Database tables created.")

    # AI Provider + 생성기
    logger.info("Initializing AI provider...")
    ai_provider = get_ai_provider()
    generator = ScenarioGenerator(
        ai_provider, PromptBuilder(history_tail=settings.GENERATOR_HISTORY_TAIL)
    )
    app.state.ai_provider = ai_provider
    logger.info(f"AI provider initialized: {ai_provider.name}")

    # 세션 레지스트리
    registry = SessionRegistry(
        generator,
        store=SqlKeyValueStore(SessionLocal),
        options=ChatSessionOptions.from_settings(settings),
        debounce_seconds=settings.PERSIST_DEBOUNCE_SECONDS,
        expiry_seconds=settings.SESSION_EXPIRY_SECONDS,
    )
    app.state.session_registry = registry
    logger.info("SessionRegistry initialized.")

    yield

    # 종료 시 대기 중인 저장 기록
    logger.info("Shutting down...")
    registry.flush_all()


app = FastAPI(title="Director Chat", lifespan=lifespan)

app.include_router(health_router)
app.include_router(chat_router)
