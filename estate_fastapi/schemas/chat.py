from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from estate_fastapi.core.constants import (DEFAULT_LOCALE, MAX_LEN_MESSAGE,
                                           MAX_LEN_NAME, MAX_LEN_PHONE,
                                           MAX_LEN_SENDER_NAME)
from estate_fastapi.models.chat import ChatStatus, MessageSender
from estate_fastapi.schemas.property import PropertyCard


class ReplyStatus(str, Enum):
    REPLIED = 'replied'
    SENT_TO_LIVE = 'sent_to_live'


class ChatStartIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_LEN_NAME)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=MAX_LEN_PHONE)
    locale: str = DEFAULT_LOCALE

    @field_validator('name', 'phone')
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('Field must not be blank')
        return value


class VisitorMessageIn(BaseModel):
    session_id: str = Field(..., max_length=36)
    message: str = Field(..., min_length=1, max_length=MAX_LEN_MESSAGE)
    locale: Optional[str] = None

    @field_validator('message')
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('Message must not be blank')
        return value


class OperatorReplyIn(BaseModel):
    session_id: str = Field(..., max_length=36)
    message: str = Field(..., min_length=1, max_length=MAX_LEN_MESSAGE)
    operator_name: Optional[str] = Field(
        default=None, max_length=MAX_LEN_SENDER_NAME
    )

    @field_validator('message')
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('Message must not be blank')
        return value


class SessionIdIn(BaseModel):
    session_id: str = Field(..., max_length=36)


class TypingIn(SessionIdIn):
    is_typing: bool


class MessageOut(BaseModel):
    id: int
    content: str
    text: str
    property: Optional[PropertyCard] = None
    sender: MessageSender
    sender_name: Optional[str] = None
    created_at: datetime


class ChatSessionOut(BaseModel):
    id: str
    user_name: str
    user_email: str
    user_phone: str
    locale: str
    status: ChatStatus
    is_read: bool
    admin_typing: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    messages: List[MessageOut] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)


class LiveSessionOut(ChatSessionOut):
    last_message: Optional[str] = None


class ChatHistoryOut(BaseModel):
    status: ChatStatus
    admin_typing: bool
    messages: List[MessageOut]


class VisitorMessageOut(BaseModel):
    status: ReplyStatus
    session_status: ChatStatus
    message: Optional[MessageOut] = None


class OkOut(BaseModel):
    success: bool = True
