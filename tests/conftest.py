import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from estate_fastapi.api.deps import get_responder
from estate_fastapi.core.base import ChatSession, Photo, Property
from estate_fastapi.core.config import settings
from estate_fastapi.core.db import Base, get_session
from estate_fastapi.crud.chat import chat_session_crud
from estate_fastapi.main import app
from estate_fastapi.schemas.chat import ChatStartIn
from tests.test_constants import (TEST_BOT_REPLY, TEST_INACTIVE_PROPERTY,
                                  TEST_PROPERTY, TEST_VISITOR)

logger = logging.getLogger('estate_fastapi')


@pytest.fixture(scope="function")
async def test_engine():
    engine = create_async_engine(
        settings.get_database_url(test=True),
        echo=False,
        future=True
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def test_db(test_engine):
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="function")
async def test_session(test_db, test_engine) -> AsyncSession:
    async_session = sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_responder():
    """Stands in for the Gemini responder; ``reply`` is a spy."""
    responder = AsyncMock()
    responder.reply = AsyncMock(return_value=TEST_BOT_REPLY)
    return responder


@pytest.fixture
async def created_chat(test_session: AsyncSession) -> ChatSession:
    return await chat_session_crud.start(
        ChatStartIn(**TEST_VISITOR), test_session
    )


def _build_property(data: dict) -> Property:
    data = dict(data)
    photos = data.pop('photos', [])
    listing = Property(**data)
    listing.photos = [
        Photo(url=url, is_main=index == 0, order=index)
        for index, url in enumerate(photos)
    ]
    return listing


@pytest.fixture
async def created_property(test_session: AsyncSession) -> Property:
    listing = _build_property(TEST_PROPERTY)
    test_session.add(listing)
    await test_session.commit()
    await test_session.refresh(listing)
    return listing


@pytest.fixture
async def inactive_property(test_session: AsyncSession) -> Property:
    listing = _build_property(TEST_INACTIVE_PROPERTY)
    test_session.add(listing)
    await test_session.commit()
    await test_session.refresh(listing)
    return listing


@pytest.fixture(scope='function')
async def async_client(test_session: AsyncSession):
    transport = ASGITransport(app=app)
    async with AsyncClient(
            transport=transport,
            base_url='http://test'
    ) as client:
        yield client


@pytest.fixture(scope='function', autouse=True)
async def override_dependencies(test_engine, fake_responder):
    """
    Fixture that automatically overrides dependencies for all tests.
    """
    logger = logging.getLogger("estate_fastapi")
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)
        handler = RotatingFileHandler(
            "test_estate_fastapi.log",
            maxBytes=2000,
            backupCount=100
        )
        handler.setLevel(logging.DEBUG)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    async_sessionmaker = sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async def override_get_session():
        async with async_sessionmaker() as session:
            yield session

    def override_get_responder():
        return fake_responder

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_responder] = override_get_responder

    logger.debug("Dependencies overridden for the test")

    yield

    app.dependency_overrides.clear()
    logger.debug("Dependencies overrides cleared after the test")
