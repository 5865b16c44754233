from fastapi import Depends, Request

from estate_fastapi.core.config import settings
from estate_fastapi.services.chat import ChatCoordinator
from estate_fastapi.services.responder import (GeminiResponder,
                                               get_default_responder)


def get_responder(request: Request) -> GeminiResponder:
    responder = getattr(request.app.state, 'responder', None)
    if responder is None:
        responder = get_default_responder()
        request.app.state.responder = responder
    return responder


def get_chat_coordinator(
    responder: GeminiResponder = Depends(get_responder),
) -> ChatCoordinator:
    return ChatCoordinator(
        responder, history_limit=settings.chat_history_limit
    )
