"""
Property cards travel inside message text as
``TEXT [PROPERTY_DATA]{json}[/PROPERTY_DATA]``. Only this module knows
about the delimiters; the rest of the code works with ``MessageBody``.
"""
import json
import logging
from typing import Optional

from pydantic import BaseModel, ValidationError

from estate_fastapi.core.constants import (PROPERTY_DATA_CLOSE,
                                           PROPERTY_DATA_OPEN)
from estate_fastapi.models.chat import Message
from estate_fastapi.schemas.chat import MessageOut
from estate_fastapi.schemas.property import PropertyCard

logger = logging.getLogger('estate_fastapi')


class MessageBody(BaseModel):
    text: str
    card: Optional[PropertyCard] = None


def encode_message(text: str, card: PropertyCard | None = None) -> str:
    if card is None:
        return text
    payload = json.dumps(card.model_dump(), ensure_ascii=False)
    return f'{text} {PROPERTY_DATA_OPEN}{payload}{PROPERTY_DATA_CLOSE}'


def decode_message(content: str) -> MessageBody:
    start = content.find(PROPERTY_DATA_OPEN)
    if start == -1:
        return MessageBody(text=content)
    end = content.find(PROPERTY_DATA_CLOSE, start)
    if end == -1:
        return MessageBody(text=content)

    raw = content[start + len(PROPERTY_DATA_OPEN):end]
    try:
        card = PropertyCard.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f'Malformed property card payload: {e}')
        return MessageBody(text=content)

    text = (
        content[:start] + content[end + len(PROPERTY_DATA_CLOSE):]
    ).strip()
    return MessageBody(text=text, card=card)


def message_to_out(message: Message) -> MessageOut:
    body = decode_message(message.content)
    return MessageOut(
        id=message.id,
        content=message.content,
        text=body.text,
        property=body.card,
        sender=message.sender,
        sender_name=message.sender_name,
        created_at=message.created_at,
    )
