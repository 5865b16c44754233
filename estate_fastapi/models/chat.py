import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime
from sqlalchemy import Enum as SqlEnum
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import relationship

from estate_fastapi.core.constants import (DEFAULT_LOCALE, MAX_LEN_EMAIL,
                                           MAX_LEN_NAME, MAX_LEN_PHONE,
                                           MAX_LEN_SENDER_NAME)
from estate_fastapi.core.db import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChatStatus(str, Enum):
    BOT = 'bot'
    LIVE_WAITING = 'live_waiting'
    LIVE_ACTIVE = 'live_active'


LIVE_STATUSES = (ChatStatus.LIVE_WAITING, ChatStatus.LIVE_ACTIVE)


class MessageSender(str, Enum):
    USER = 'user'
    BOT = 'bot'
    OPERATOR = 'operator'


class ChatSession(Base):
    id = Column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_name = Column(String(MAX_LEN_NAME), nullable=False)
    user_email = Column(String(MAX_LEN_EMAIL), nullable=False)
    user_phone = Column(String(MAX_LEN_PHONE), nullable=False)
    locale = Column(String(8), default=DEFAULT_LOCALE, nullable=False)
    status = Column(
        SqlEnum(
            ChatStatus,
            name='chatstatus',
            values_callable=lambda enum: [e.value for e in enum],
        ),
        default=ChatStatus.BOT,
        nullable=False,
        index=True,
    )
    # Unseen-by-operator marker
    is_read = Column(Boolean, default=True, nullable=False)
    admin_typing = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
    )

    messages = relationship(
        'Message',
        back_populates='session',
        cascade='all, delete-orphan',
        order_by=lambda: [Message.created_at, Message.id],
    )

    @property
    def is_live(self) -> bool:
        return self.status in LIVE_STATUSES

    def touch(self) -> None:
        self.updated_at = utc_now()


class Message(Base):
    session_id = Column(
        String(36),
        ForeignKey('chatsession.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    sender = Column(
        SqlEnum(
            MessageSender,
            name='messagesender',
            values_callable=lambda enum: [e.value for e in enum],
        ),
        nullable=False,
    )
    sender_name = Column(String(MAX_LEN_SENDER_NAME), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)

    session = relationship('ChatSession', back_populates='messages')
