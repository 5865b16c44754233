from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from estate_fastapi.api.deps import get_chat_coordinator
from estate_fastapi.core.db import get_session
from estate_fastapi.schemas.chat import (ChatHistoryOut, ChatSessionOut,
                                         ChatStartIn, OkOut, SessionIdIn,
                                         VisitorMessageIn, VisitorMessageOut)
from estate_fastapi.services.chat import ChatCoordinator

router = APIRouter(prefix='/chat', tags=['chat'])


@router.post(
    '/start',
    status_code=status.HTTP_201_CREATED,
    response_model=ChatSessionOut,
)
async def start_chat(
    payload: ChatStartIn,
    session: AsyncSession = Depends(get_session),
    coordinator: ChatCoordinator = Depends(get_chat_coordinator),
):
    return await coordinator.start(session, payload)


@router.post(
    '/message',
    status_code=status.HTTP_200_OK,
    response_model=VisitorMessageOut,
)
async def send_visitor_message(
    payload: VisitorMessageIn,
    session: AsyncSession = Depends(get_session),
    coordinator: ChatCoordinator = Depends(get_chat_coordinator),
):
    return await coordinator.handle_visitor_message(
        session,
        session_id=payload.session_id,
        text=payload.message,
        locale=payload.locale,
    )


@router.get(
    '/history',
    status_code=status.HTTP_200_OK,
    response_model=ChatHistoryOut,
)
async def get_chat_history(
    session_id: str = Query(..., max_length=36),
    after_id: int | None = Query(default=None, ge=0),
    session: AsyncSession = Depends(get_session),
    coordinator: ChatCoordinator = Depends(get_chat_coordinator),
):
    """Polled by the widget; returns status, typing flag and messages."""
    return await coordinator.get_read_model(
        session, session_id, after_id=after_id
    )


@router.post(
    '/end',
    status_code=status.HTTP_200_OK,
    response_model=OkOut,
)
async def end_chat(
    payload: SessionIdIn,
    session: AsyncSession = Depends(get_session),
    coordinator: ChatCoordinator = Depends(get_chat_coordinator),
):
    await coordinator.end_chat(session, payload.session_id)
    return OkOut()
