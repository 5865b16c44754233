import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from estate_fastapi.api.admin_chat import router as admin_chat_router
from estate_fastapi.api.chat import router as chat_router
from estate_fastapi.api.property import router as property_router
from estate_fastapi.core.config import settings
from estate_fastapi.services.responder import get_default_responder

# --- Logging ---
logger = logging.getLogger('estate_fastapi')
logger.setLevel(logging.DEBUG)

handler = RotatingFileHandler(
    settings.log_file, maxBytes=200000, backupCount=100
)
handler.setLevel(logging.DEBUG)

formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
handler.setFormatter(formatter)
logger.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One responder handle per process, swapped out in tests
    app.state.responder = get_default_responder()
    if not settings.gemini_api_key:
        logger.warning('GEMINI_API_KEY is not set, assistant will apologize')
    yield


app = FastAPI(
    title=settings.app_title,
    description=settings.app_description,
    lifespan=lifespan,
)


@app.get("/health")
async def health():
    return {"status": 'ok'}


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=['GET', 'POST', 'PUT', 'DELETE', 'PATCH', 'OPTIONS'],
    allow_headers=['*'],
)
app.include_router(chat_router)
app.include_router(admin_chat_router)
app.include_router(property_router)
