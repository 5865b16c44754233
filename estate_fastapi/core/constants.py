MAX_LEN_NAME = 120
MAX_LEN_EMAIL = 255
MAX_LEN_PHONE = 32
MAX_LEN_SENDER_NAME = 120
MAX_LEN_MESSAGE = 4000
MAX_LEN_TITLE = 256
MAX_LEN_LOCATION = 256
MAX_LEN_URL = 1056

# Chat
LIVE_SUPPORT_TOKEN = '[LIVE_SUPPORT_REQUEST]'
PROPERTY_DATA_OPEN = '[PROPERTY_DATA]'
PROPERTY_DATA_CLOSE = '[/PROPERTY_DATA]'
SEARCH_PROPERTIES_ACTION = 'search_properties'
CHAT_HISTORY_LIMIT = 20

DEFAULT_LOCALE = 'tr'
SUPPORTED_LOCALES = ('tr', 'en', 'ar')

ASSISTANT_NAMES = {
    'tr': 'Kenan Emlak Asistanı',
    'en': 'Kenan Real Estate Assistant',
    'ar': 'مساعد كنان للعقارات',
}
OPERATOR_NAMES = {
    'tr': 'Yetkili',
    'en': 'Agent',
    'ar': 'المسؤول',
}
WELCOME_MESSAGES = {
    'tr': (
        'Merhaba {name}, Kenan Kadıoğlu Gayrimenkul\'e hoş geldiniz. '
        'Size nasıl yardımcı olabilirim?'
    ),
    'en': (
        'Hello {name}, welcome to Kenan Kadıoğlu Real Estate. '
        'How can I help you?'
    ),
    'ar': (
        'مرحباً {name}، أهلاً بك في كنان كاديوغلو للعقارات. '
        'كيف يمكنني مساعدتك؟'
    ),
}
LIVE_SUPPORT_MESSAGES = {
    'tr': (
        'Sizi canlı destek ekibimize aktarıyorum. Lütfen hatta kalın, '
        'en kısa sürede bir temsilcimiz sizinle ilgilenecektir.'
    ),
    'en': (
        'I am connecting you to our live support team. Please stay '
        'on the line, a representative will be with you shortly.'
    ),
    'ar': (
        'سأقوم بتحويلك إلى فريق الدعم المباشر. يرجى الانتظار، '
        'سيتواصل معك أحد ممثلينا في أقرب وقت.'
    ),
}
PROPERTY_FOUND_MESSAGES = {
    'tr': 'Kriterlerinize uygun bir ilan buldum: {title}',
    'en': 'I found a listing that matches your criteria: {title}',
    'ar': 'وجدت عقاراً يطابق معاييرك: {title}',
}
PROPERTY_NOT_FOUND_MESSAGES = {
    'tr': (
        'Üzgünüm, kriterlerinize uygun bir ilan bulamadım. '
        'Farklı bir arama yapmak ister misiniz?'
    ),
    'en': (
        'Sorry, I could not find a listing that matches your criteria. '
        'Would you like to try a different search?'
    ),
    'ar': (
        'عذراً، لم أجد عقاراً يطابق معاييرك. '
        'هل تريد تجربة بحث مختلف؟'
    ),
}
APOLOGY_MESSAGES = {
    'tr': (
        'Üzgünüm, şu anda geçici bir sorun yaşıyorum. Lütfen daha sonra '
        'tekrar deneyin veya canlı destek hattımızı kullanın.'
    ),
    'en': (
        'Sorry, I am having a temporary problem right now. Please try '
        'again later or use our live support line.'
    ),
    'ar': (
        'عذراً، أواجه مشكلة مؤقتة حالياً. يرجى المحاولة لاحقاً '
        'أو استخدام خط الدعم المباشر.'
    ),
}
RESPONSE_LANGUAGES = {
    'tr': 'Türkçe',
    'en': 'English',
    'ar': 'العربية',
}


def normalize_locale(locale: str | None) -> str:
    if not locale:
        return DEFAULT_LOCALE
    locale = locale.strip().lower().replace('_', '-').split('-')[0]
    return locale if locale in SUPPORTED_LOCALES else DEFAULT_LOCALE


def localized(templates: dict, locale: str | None, **kwargs) -> str:
    template = templates[normalize_locale(locale)]
    return template.format(**kwargs) if kwargs else template
