from estate_fastapi.core.db import Base  # noqa
from estate_fastapi.models.chat import ChatSession, Message  # noqa
from estate_fastapi.models.property import Photo, Property  # noqa

__all__ = [
    'Base',
    'ChatSession',
    'Message',
    'Property',
    'Photo',
]
