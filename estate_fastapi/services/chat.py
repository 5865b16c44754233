"""
Chat session coordinator.

A session is served by the assistant while its status is ``bot``. When the
assistant answers with the live support token the session moves to
``live_waiting``; the first operator reply moves it to ``live_active``.
While live, visitor messages are stored and flagged unread for the operator
console but never sent to the assistant. Ending the chat resets the status to
``bot`` immediately.

Both the visitor widget and the operator console poll ``get_read_model``;
there is no push channel.
"""
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from estate_fastapi.core.constants import (APOLOGY_MESSAGES, ASSISTANT_NAMES,
                                           CHAT_HISTORY_LIMIT,
                                           LIVE_SUPPORT_MESSAGES,
                                           OPERATOR_NAMES,
                                           PROPERTY_FOUND_MESSAGES,
                                           PROPERTY_NOT_FOUND_MESSAGES,
                                           localized, normalize_locale)
from estate_fastapi.crud.chat import (chat_session_crud, chat_session_exists,
                                      message_crud)
from estate_fastapi.crud.property import property_crud, property_to_card
from estate_fastapi.models.chat import (ChatSession, ChatStatus, Message,
                                        MessageSender)
from estate_fastapi.schemas.chat import (ChatHistoryOut, ChatSessionOut,
                                         ChatStartIn, LiveSessionOut,
                                         MessageOut, ReplyStatus,
                                         VisitorMessageOut)
from estate_fastapi.schemas.property import SearchCriteria
from estate_fastapi.services.message_codec import (decode_message,
                                                   encode_message,
                                                   message_to_out)
from estate_fastapi.services.responder import (ChatTurn, GeminiResponder,
                                               ReplyKind, parse_reply)

logger = logging.getLogger('estate_fastapi')


def session_to_out(
    chat_session: ChatSession,
    messages: List[Message],
    schema=ChatSessionOut,
    **extra,
):
    return schema(
        id=chat_session.id,
        user_name=chat_session.user_name,
        user_email=chat_session.user_email,
        user_phone=chat_session.user_phone,
        locale=chat_session.locale,
        status=chat_session.status,
        is_read=chat_session.is_read,
        admin_typing=chat_session.admin_typing,
        created_at=chat_session.created_at,
        updated_at=chat_session.updated_at,
        messages=[message_to_out(message) for message in messages],
        **extra,
    )


class ChatCoordinator:
    def __init__(
        self,
        responder: GeminiResponder,
        history_limit: int = CHAT_HISTORY_LIMIT,
    ):
        self.responder = responder
        self.history_limit = history_limit

    async def start(
        self, session: AsyncSession, payload: ChatStartIn
    ) -> ChatSessionOut:
        chat_session = await chat_session_crud.start(payload, session)
        messages = await message_crud.get_history(session, chat_session.id)
        return session_to_out(chat_session, messages)

    async def handle_visitor_message(
        self,
        session: AsyncSession,
        session_id: str,
        text: str,
        locale: Optional[str] = None,
    ) -> VisitorMessageOut:
        chat_session = await chat_session_exists(session_id, session)
        locale = normalize_locale(locale or chat_session.locale)

        # Stored before anything else so upstream failures never lose it
        user_message = await message_crud.append(
            session, session_id, text, MessageSender.USER
        )

        if chat_session.is_live:
            await chat_session_crud.set_flags(
                chat_session, session, is_read=False
            )
            logger.debug(f'Message routed to operator: session={session_id}')
            return VisitorMessageOut(
                status=ReplyStatus.SENT_TO_LIVE,
                session_status=chat_session.status,
            )

        history = await message_crud.get_recent(
            session,
            session_id,
            limit=self.history_limit,
            exclude_id=user_message.id,
        )
        turns = [
            ChatTurn(
                role='user' if m.sender == MessageSender.USER else 'model',
                text=m.content,
            )
            for m in history
            if m.content
        ]

        try:
            content = await self._assistant_reply(
                session, chat_session, turns, text, locale
            )
        except Exception as e:
            logger.exception(
                f'Assistant reply failed for session {session_id}: {e}'
            )
            await session.rollback()
            await session.refresh(chat_session)
            content = localized(APOLOGY_MESSAGES, locale)

        bot_message = await message_crud.append(
            session,
            session_id,
            content,
            MessageSender.BOT,
            sender_name=localized(ASSISTANT_NAMES, locale),
        )
        return VisitorMessageOut(
            status=ReplyStatus.REPLIED,
            session_status=chat_session.status,
            message=message_to_out(bot_message),
        )

    async def _assistant_reply(
        self,
        session: AsyncSession,
        chat_session: ChatSession,
        turns: List[ChatTurn],
        text: str,
        locale: str,
    ) -> str:
        raw = await self.responder.reply(turns, text, locale)
        reply = parse_reply(raw)

        if reply.kind == ReplyKind.SEARCH:
            return await self._search_reply(session, reply.criteria, locale)

        if reply.kind == ReplyKind.HANDOFF:
            # Committed together with the handoff message
            await chat_session_crud.set_flags(
                chat_session,
                session,
                commit=False,
                status=ChatStatus.LIVE_WAITING,
                is_read=False,
            )
            logger.info(f'Session {chat_session.id} handed off to operators')
            return localized(LIVE_SUPPORT_MESSAGES, locale)

        return reply.text

    async def _search_reply(
        self,
        session: AsyncSession,
        criteria: SearchCriteria,
        locale: str,
    ) -> str:
        listings = await property_crud.search(session, criteria, limit=1)
        if not listings:
            return localized(PROPERTY_NOT_FOUND_MESSAGES, locale)
        listing = listings[0]
        return encode_message(
            localized(PROPERTY_FOUND_MESSAGES, locale, title=listing.title),
            property_to_card(listing),
        )

    async def operator_reply(
        self,
        session: AsyncSession,
        session_id: str,
        text: str,
        operator_name: Optional[str] = None,
    ) -> MessageOut:
        chat_session = await chat_session_exists(session_id, session)
        message = await message_crud.append(
            session,
            session_id,
            text,
            MessageSender.OPERATOR,
            sender_name=(
                operator_name or localized(OPERATOR_NAMES, chat_session.locale)
            ),
            commit=False,
        )
        await chat_session_crud.set_flags(
            chat_session,
            session,
            status=ChatStatus.LIVE_ACTIVE,
            is_read=True,
            admin_typing=False,
        )
        return message_to_out(message)

    async def set_typing(
        self, session: AsyncSession, session_id: str, is_typing: bool
    ) -> None:
        chat_session = await chat_session_exists(session_id, session)
        await chat_session_crud.set_flags(
            chat_session, session, admin_typing=is_typing
        )

    async def end_chat(self, session: AsyncSession, session_id: str) -> None:
        chat_session = await chat_session_exists(session_id, session)
        await chat_session_crud.set_flags(
            chat_session,
            session,
            status=ChatStatus.BOT,
            admin_typing=False,
        )
        logger.debug(f'Chat ended, session {session_id} back to bot')

    async def mark_read(self, session: AsyncSession, session_id: str) -> None:
        chat_session = await chat_session_exists(session_id, session)
        await chat_session_crud.update(
            chat_session, {'is_read': True}, session=session
        )

    async def get_read_model(
        self,
        session: AsyncSession,
        session_id: str,
        after_id: Optional[int] = None,
    ) -> ChatHistoryOut:
        chat_session = await chat_session_exists(session_id, session)
        messages = await message_crud.get_history(
            session, session_id, after_id=after_id
        )
        return ChatHistoryOut(
            status=chat_session.status,
            admin_typing=chat_session.admin_typing,
            messages=[message_to_out(message) for message in messages],
        )

    async def list_live(self, session: AsyncSession) -> List[LiveSessionOut]:
        sessions = await chat_session_crud.get_live(session)
        result = []
        for chat_session in sessions:
            messages = list(chat_session.messages)
            last_message = (
                decode_message(messages[-1].content).text
                if messages else None
            )
            result.append(
                session_to_out(
                    chat_session,
                    messages,
                    schema=LiveSessionOut,
                    last_message=last_message,
                )
            )
        return result
