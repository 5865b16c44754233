from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from estate_fastapi.api.deps import get_chat_coordinator
from estate_fastapi.core.db import get_session
from estate_fastapi.schemas.chat import (LiveSessionOut, MessageOut, OkOut,
                                         OperatorReplyIn, TypingIn)
from estate_fastapi.services.chat import ChatCoordinator

router = APIRouter(prefix='/admin/chats', tags=['admin-chat'])


@router.get(
    '',
    status_code=status.HTTP_200_OK,
    response_model=list[LiveSessionOut],
)
async def list_live_chats(
    session: AsyncSession = Depends(get_session),
    coordinator: ChatCoordinator = Depends(get_chat_coordinator),
):
    return await coordinator.list_live(session)


@router.post(
    '/reply',
    status_code=status.HTTP_200_OK,
    response_model=MessageOut,
)
async def reply_to_chat(
    payload: OperatorReplyIn,
    session: AsyncSession = Depends(get_session),
    coordinator: ChatCoordinator = Depends(get_chat_coordinator),
):
    return await coordinator.operator_reply(
        session,
        session_id=payload.session_id,
        text=payload.message,
        operator_name=payload.operator_name,
    )


@router.post(
    '/typing',
    status_code=status.HTTP_200_OK,
    response_model=OkOut,
)
async def set_typing(
    payload: TypingIn,
    session: AsyncSession = Depends(get_session),
    coordinator: ChatCoordinator = Depends(get_chat_coordinator),
):
    await coordinator.set_typing(session, payload.session_id, payload.is_typing)
    return OkOut()


@router.patch(
    '/{session_id}/read',
    status_code=status.HTTP_200_OK,
    response_model=OkOut,
)
async def mark_chat_read(
    session_id: str,
    session: AsyncSession = Depends(get_session),
    coordinator: ChatCoordinator = Depends(get_chat_coordinator),
):
    await coordinator.mark_read(session, session_id)
    return OkOut()
