import logging
from http import HTTPStatus
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from estate_fastapi.core.constants import (ASSISTANT_NAMES, WELCOME_MESSAGES,
                                           localized, normalize_locale)
from estate_fastapi.crud.base import CRUDBase
from estate_fastapi.models.chat import (LIVE_STATUSES, ChatSession, ChatStatus,
                                        Message, MessageSender)
from estate_fastapi.schemas.chat import ChatStartIn

logger = logging.getLogger('estate_fastapi')


async def chat_session_exists(
    session_id: str, session: AsyncSession
) -> ChatSession:
    chat_session = await chat_session_crud.get(session, session_id)
    if chat_session is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND, detail='Session not found'
        )
    return chat_session


class CRUDChatSession(CRUDBase[ChatSession, ChatStartIn, ChatStartIn]):
    async def start(
        self, obj_in: ChatStartIn, session: AsyncSession
    ) -> ChatSession:
        locale = normalize_locale(obj_in.locale)
        try:
            chat_session = ChatSession(
                user_name=obj_in.name,
                user_email=str(obj_in.email),
                user_phone=obj_in.phone,
                locale=locale,
                status=ChatStatus.BOT,
            )
            session.add(chat_session)
            await session.flush()
            session.add(
                Message(
                    session_id=chat_session.id,
                    content=localized(
                        WELCOME_MESSAGES, locale, name=obj_in.name
                    ),
                    sender=MessageSender.BOT,
                    sender_name=localized(ASSISTANT_NAMES, locale),
                )
            )
            await session.commit()
            await session.refresh(chat_session)
            logger.debug(f'Chat session started: {chat_session.id}')
            return chat_session
        except SQLAlchemyError as e:
            logger.error(f'Database error occurred: {e}')
            await session.rollback()
            raise HTTPException(
                status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
                detail='Could not start chat session',
            )

    async def set_flags(
        self,
        chat_session: ChatSession,
        session: AsyncSession,
        commit: bool = True,
        **flags,
    ) -> ChatSession:
        chat_session.touch()
        return await self.update(
            chat_session, flags, session=session, commit=commit
        )

    async def get_live(self, session: AsyncSession) -> List[ChatSession]:
        result = await session.execute(
            select(ChatSession)
            .options(selectinload(ChatSession.messages))
            .where(ChatSession.status.in_(LIVE_STATUSES))
            .order_by(ChatSession.updated_at.desc())
        )
        return result.scalars().all()


class CRUDMessage(CRUDBase[Message, ChatStartIn, ChatStartIn]):
    async def append(
        self,
        session: AsyncSession,
        session_id: str,
        content: str,
        sender: MessageSender,
        sender_name: Optional[str] = None,
        commit: bool = True,
    ) -> Message:
        return await self.create(
            {
                'session_id': session_id,
                'content': content,
                'sender': sender,
                'sender_name': sender_name,
            },
            session=session,
            commit=commit,
        )

    async def get_history(
        self,
        session: AsyncSession,
        session_id: str,
        after_id: Optional[int] = None,
    ) -> List[Message]:
        stmt = (
            select(Message)
            .where(Message.session_id == session_id)
            .order_by(Message.created_at, Message.id)
        )
        if after_id is not None:
            stmt = stmt.where(Message.id > after_id)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_recent(
        self,
        session: AsyncSession,
        session_id: str,
        limit: int,
        exclude_id: Optional[int] = None,
    ) -> List[Message]:
        """Last ``limit`` messages of a session, oldest first."""
        stmt = select(Message).where(Message.session_id == session_id)
        if exclude_id is not None:
            stmt = stmt.where(Message.id != exclude_id)
        result = await session.execute(
            stmt.order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
        )
        return list(reversed(result.scalars().all()))


chat_session_crud = CRUDChatSession(ChatSession)
message_crud = CRUDMessage(Message)
