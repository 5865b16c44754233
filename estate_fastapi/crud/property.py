import logging
from http import HTTPStatus
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from estate_fastapi.crud.base import CRUDBase
from estate_fastapi.models.property import Property
from estate_fastapi.schemas.property import (PropertyCard, PropertyOut,
                                             SearchCriteria)

logger = logging.getLogger('estate_fastapi')

SEARCHABLE_FIELDS = (
    Property.title,
    Property.description,
    Property.location,
    Property.heating,
    Property.type,
    Property.category,
    Property.kitchen,
)


async def active_property_exists(
    property_id: str, session: AsyncSession
) -> Property:
    listing = await property_crud.get_active_by_id(property_id, session)
    if listing is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND, detail='Property not found'
        )
    return listing


def property_to_card(listing: Property) -> PropertyCard:
    return PropertyCard(
        id=listing.id,
        title=listing.title,
        price=listing.price_display,
        location=listing.location,
        rooms=listing.rooms,
        bathrooms=listing.bathrooms,
        area=listing.area,
        image=listing.main_photo_url,
    )


class CRUDProperty(CRUDBase[Property, PropertyOut, PropertyOut]):
    async def get_active(self, session: AsyncSession) -> List[Property]:
        result = await session.execute(
            select(Property)
            .options(selectinload(Property.photos))
            .where(Property.is_active.is_(True))
            .order_by(Property.created_at.desc())
        )
        return result.scalars().all()

    async def get_active_by_id(
        self, property_id: str, session: AsyncSession
    ) -> Optional[Property]:
        result = await session.execute(
            select(Property)
            .options(selectinload(Property.photos))
            .where(
                Property.id == property_id,
                Property.is_active.is_(True),
            )
        )
        return result.scalars().first()

    async def search(
        self,
        session: AsyncSession,
        criteria: SearchCriteria,
        limit: int = 1,
    ) -> List[Property]:
        stmt = (
            select(Property)
            .options(selectinload(Property.photos))
            .where(Property.is_active.is_(True))
        )
        if criteria.query:
            pattern = f'%{criteria.query}%'
            stmt = stmt.where(
                or_(*(field.ilike(pattern) for field in SEARCHABLE_FIELDS))
            )
        if criteria.min_area:
            stmt = stmt.where(Property.area >= criteria.min_area)
        if criteria.max_area:
            stmt = stmt.where(Property.area <= criteria.max_area)
        if criteria.rooms:
            stmt = stmt.where(Property.rooms.contains(criteria.rooms))

        logger.debug(f'Property search: {criteria.model_dump()}')
        result = await session.execute(
            stmt.order_by(Property.created_at.desc()).limit(limit)
        )
        return result.scalars().all()


property_crud = CRUDProperty(Property)
