import json
import logging
import re
from enum import Enum
from typing import List, Literal, Optional

import google.generativeai as genai
from pydantic import BaseModel, ValidationError

from estate_fastapi.core.config import settings
from estate_fastapi.core.constants import (ASSISTANT_NAMES, LIVE_SUPPORT_TOKEN,
                                           RESPONSE_LANGUAGES,
                                           SEARCH_PROPERTIES_ACTION,
                                           localized, normalize_locale)
from estate_fastapi.schemas.property import SearchCriteria

logger = logging.getLogger('estate_fastapi')

SYSTEM_PROMPT = """
Sen "Kenan Kadıoğlu Gayrimenkul" için çalışan profesyonel, yardımsever ve \
nazik bir emlak asistanısın. Adın "{assistant_name}".
Görevin SADECE gayrimenkul hizmetleri (konut/işyeri kiralama, satma, arsa \
alım-satım, ekspertiz vb.) hakkında bilgi vermektir.

Kurallar:
1. Yanıtlarını her zaman {language} dilinde, kibar ve profesyonel şekilde ver.
2. Emlak dışı konularda (iş arama, kariyer vb.) yardımcı olamayacağını \
nazikçe belirt.
3. Kullanıcı "canlı destek", "insan", "yetkili" veya "temsilci" ile \
görüşmek isterse başka hiçbir şey yazmadan SADECE şunu döndür: {token}
4. Soru yetki alanını aşıyorsa nazikçe canlı desteğe bağlanmayı teklif et.
5. Kullanıcı belirli bir ilan ararsa (konum, özellik, metrekare, oda sayısı), \
başka hiçbir metin eklemeden SADECE şu JSON nesnesini döndür:
{{"action": "{action}", "criteria": {{"query": "arama metni", \
"minArea": 0, "maxArea": 0, "rooms": null}}}}
Kısıtlanmayan alanlar için 0 veya null kullan. "rooms" değeri "3+1" gibi \
bir metindir.
6. İletişim bilgileri sorulursa: "Telefon: +90 555 555 55 55, Adres: Bağdat \
Caddesi, Kadıköy/İstanbul, E-posta: info@kenankadioglugayrimenkul.com".
7. Emin olmadığın yasal veya finansal tavsiyeler verme.
"""

_FENCE_RE = re.compile(r'^```(?:json)?\s*|\s*```$', re.IGNORECASE)


class ResponderError(RuntimeError):
    pass


class ChatTurn(BaseModel):
    role: Literal['user', 'model']
    text: str


class ReplyKind(str, Enum):
    TEXT = 'text'
    SEARCH = 'search'
    HANDOFF = 'handoff'


class ResponderReply(BaseModel):
    kind: ReplyKind
    text: str
    criteria: Optional[SearchCriteria] = None


def build_system_prompt(locale: str) -> str:
    return SYSTEM_PROMPT.format(
        assistant_name=localized(ASSISTANT_NAMES, locale),
        language=localized(RESPONSE_LANGUAGES, locale),
        token=LIVE_SUPPORT_TOKEN,
        action=SEARCH_PROPERTIES_ACTION,
    )


def _parse_search_instruction(raw: str) -> Optional[SearchCriteria]:
    candidate = _FENCE_RE.sub('', raw.strip())
    start, end = candidate.find('{'), candidate.rfind('}')
    if start == -1 or end <= start:
        return None
    try:
        payload = json.loads(candidate[start:end + 1])
    except json.JSONDecodeError as e:
        logger.debug(f'Responder output is not JSON, using as text: {e}')
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get('action') != SEARCH_PROPERTIES_ACTION:
        return None
    criteria = payload.get('criteria') or {}
    if not isinstance(criteria, dict):
        return None
    try:
        return SearchCriteria.model_validate(criteria)
    except ValidationError as e:
        logger.warning(f'Invalid search criteria from responder: {e}')
        return None


def parse_reply(raw: str) -> ResponderReply:
    """Classify raw responder output as a search, a handoff or plain text."""
    criteria = _parse_search_instruction(raw)
    if criteria is not None:
        return ResponderReply(
            kind=ReplyKind.SEARCH, text=raw, criteria=criteria
        )
    if LIVE_SUPPORT_TOKEN in raw:
        return ResponderReply(kind=ReplyKind.HANDOFF, text=raw)
    return ResponderReply(kind=ReplyKind.TEXT, text=raw)


class GeminiResponder:
    def __init__(
        self,
        api_key: str,
        model_name: str = 'gemini-2.0-flash',
        max_output_tokens: int = 500,
        temperature: float = 0.7,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.generation_config = {
            'max_output_tokens': max_output_tokens,
            'temperature': temperature,
        }
        self._models: dict[str, genai.GenerativeModel] = {}
        if api_key:
            genai.configure(api_key=api_key)
        logger.info(f'Gemini responder initialized with {model_name}')

    def _get_model(self, locale: str) -> genai.GenerativeModel:
        if locale not in self._models:
            self._models[locale] = genai.GenerativeModel(
                self.model_name,
                generation_config=self.generation_config,
                system_instruction=build_system_prompt(locale),
            )
        return self._models[locale]

    async def reply(
        self,
        history: List[ChatTurn],
        message: str,
        locale: str,
    ) -> str:
        if not self.api_key:
            raise ResponderError('Gemini API key is not configured')
        locale = normalize_locale(locale)
        chat = self._get_model(locale).start_chat(
            history=[
                {'role': turn.role, 'parts': [turn.text]}
                for turn in history
            ]
        )
        try:
            response = await chat.send_message_async(message)
            return response.text
        except Exception as e:
            logger.error(f'Gemini API error: {e}')
            raise ResponderError(str(e)) from e


def get_default_responder() -> GeminiResponder:
    return GeminiResponder(
        api_key=settings.gemini_api_key,
        model_name=settings.gemini_model,
        max_output_tokens=settings.gemini_max_output_tokens,
        temperature=settings.gemini_temperature,
    )
