import asyncio

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import text

from estate_fastapi.core.db import get_engine


async def check_database_connection():
    try:
        async with AsyncSession(get_engine()) as session:
            async with session.begin():
                await session.execute(text("SELECT 1"))
        print('Database connection established')
    except OperationalError as e:
        print('Database connection failed:', e)

if __name__ == "__main__":
    asyncio.run(check_database_connection())
