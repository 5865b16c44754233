import asyncio

from estate_fastapi.core.base import Base, Photo, Property
from estate_fastapi.core.db import get_async_session, get_engine

SAMPLE_PROPERTIES = [
    {
        'title': 'Deniz manzaralı 3+1 daire',
        'type': 'Daire',
        'category': 'Satılık',
        'price': '8.500.000',
        'location': 'Kadıköy, İstanbul',
        'area': 145,
        'area_net': 120,
        'rooms': '3+1',
        'bathrooms': 2,
        'heating': 'Doğalgaz (Kombi)',
        'kitchen': 'Kapalı',
        'description': 'Moda sahiline yürüme mesafesinde, deniz manzaralı.',
        'photos': ['/uploads/properties/moda-1.jpg'],
    },
    {
        'title': 'Site içinde 2+1 kiralık',
        'type': 'Daire',
        'category': 'Kiralık',
        'price': '35.000',
        'location': 'Ataşehir, İstanbul',
        'area': 95,
        'area_net': 85,
        'rooms': '2+1',
        'bathrooms': 1,
        'heating': 'Merkezi',
        'kitchen': 'Açık (Amerikan)',
        'description': 'Havuzlu site içinde, eşyalı.',
        'photos': [],
    },
]


async def seed_data():
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = get_async_session()
    async with async_session() as session:
        for data in SAMPLE_PROPERTIES:
            data = dict(data)
            photos = data.pop('photos')
            listing = Property(**data)
            listing.photos = [
                Photo(url=url, is_main=index == 0, order=index)
                for index, url in enumerate(photos)
            ]
            session.add(listing)
        await session.commit()


if __name__ == "__main__":
    asyncio.run(seed_data())
