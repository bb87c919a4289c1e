"""Director chat API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.schemas import (
    ChoiceInfo,
    CreateSessionRequest,
    DirectorInfo,
    ErrorResponse,
    ExtendResponse,
    MessageInfo,
    RecoverResponse,
    SendMessageRequest,
    SendMessageResponse,
    SessionStateResponse,
    TickRequest,
    TickResponse,
)
from src.core.conversation.errors import (
    SessionBusyError,
    SessionNotFoundError,
    StaleSessionError,
)
from src.core.conversation.models import Message
from src.core.conversation.personas import PERSONA_PROFILES
from src.core.logging import get_logger
from src.services.chat_session import ChatSession
from src.services.session_registry import SessionRegistry

logger = get_logger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

_CONFLICT = {409: {"model": ErrorResponse}}
_NOT_FOUND = {404: {"model": ErrorResponse}}


def get_registry(request: Request) -> SessionRegistry:
    """SessionRegistry 인스턴스 반환 (의존성 주입)"""
    registry: SessionRegistry = request.app.state.session_registry
    return registry


def _get_session(registry: SessionRegistry, session_id: str) -> ChatSession:
    try:
        return registry.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")


def _build_message_info(message: Message) -> MessageInfo:
    return MessageInfo(
        id=message.id,
        role=message.role.value,
        content=message.content,
        timestamp=message.timestamp.isoformat(),
        choices=[ChoiceInfo(id=c.id, text=c.text, icon=c.icon) for c in message.choices],
    )


def _build_state(session: ChatSession) -> SessionStateResponse:
    ctx = session.context
    tracker = session.tracker
    return SessionStateResponse(
        session_id=session.session_id,
        director_id=session.persona,
        emotion=ctx.emotion,
        vignette=ctx.vignette,
        stage=ctx.current_stage,
        phase=session.phase.value,
        offline_mode=session.offline_mode,
        turn_count=tracker.turn_count,
        time_remaining=tracker.time_remaining,
        time_up=tracker.time_up,
        extensions_left=tracker.extensions_left,
        detail_map=dict(ctx.detail_map),
        draft_scenario=ctx.draft_scenario,
        final_scenario=ctx.final_scenario,
        messages=[_build_message_info(m) for m in session.message_log],
    )


@router.get("/directors", response_model=list[DirectorInfo])
def list_directors() -> list[DirectorInfo]:
    """감독 카탈로그"""
    return [
        DirectorInfo(
            director_id=profile.persona,
            name=profile.name,
            name_ko=profile.name_ko,
            films=list(profile.films),
            quote=profile.quote,
            emoji=profile.emoji,
        )
        for profile in PERSONA_PROFILES.values()
    ]


@router.post("/sessions", response_model=SessionStateResponse)
def create_session(
    request: CreateSessionRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionStateResponse:
    """
    대화 세션 시작

    감독과 감정을 고르면 첫 인사가 담긴 세션 상태를 반환합니다.
    """
    session = registry.create(
        request.director_id,
        request.emotion,
        vignette=request.vignette,
        session_id=request.session_id,
    )
    return _build_state(session)


@router.get(
    "/sessions/{session_id}",
    response_model=SessionStateResponse,
    responses=_NOT_FOUND,
)
def get_session_state(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionStateResponse:
    return _build_state(_get_session(registry, session_id))


@router.post(
    "/sessions/{session_id}/messages",
    response_model=SendMessageResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
)
def send_message(
    session_id: str,
    request: SendMessageRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> SendMessageResponse:
    """
    사용자 메시지 전송

    감독 응답과 갱신된 세션 상태를 반환합니다.
    응답을 기다리는 중 다시 보내면 409.
    """
    session = _get_session(registry, session_id)
    try:
        reply = session.send(request.text, message_id=request.message_id)
    except (SessionBusyError, StaleSessionError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return SendMessageResponse(
        success=True,
        reply=_build_message_info(reply),
        state=_build_state(session),
    )


@router.post(
    "/sessions/{session_id}/tick",
    response_model=TickResponse,
    responses=_NOT_FOUND,
)
def tick_session(
    session_id: str,
    request: TickRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> TickResponse:
    """카운트다운 진행 (클라이언트 타이머가 경과 초를 보고)"""
    session = _get_session(registry, session_id)
    remaining = session.tick(request.seconds)
    return TickResponse(time_remaining=remaining, time_up=session.tracker.time_up)


@router.post(
    "/sessions/{session_id}/extend",
    response_model=ExtendResponse,
    responses=_NOT_FOUND,
)
def extend_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> ExtendResponse:
    """대화 시간 연장. 한도를 넘으면 extended=False"""
    session = _get_session(registry, session_id)
    extended = session.extend_time()
    return ExtendResponse(
        extended=extended,
        time_remaining=session.tracker.time_remaining,
        extensions_left=session.tracker.extensions_left,
    )


@router.post(
    "/sessions/{session_id}/recover",
    response_model=RecoverResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
)
def recover_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> RecoverResponse:
    """저장된 스냅샷으로 복원"""
    session = _get_session(registry, session_id)
    try:
        recovered = session.recover()
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return RecoverResponse(recovered=recovered is not None, state=_build_state(session))


@router.delete(
    "/sessions/{session_id}",
    response_model=SessionStateResponse,
    responses=_NOT_FOUND,
)
def reset_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionStateResponse:
    """대화 초기화 (저장분 삭제 후 새 인사)"""
    session = _get_session(registry, session_id)
    session.reset()
    logger.info("Session reset via API: %s", session_id)
    return _build_state(session)
