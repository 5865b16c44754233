from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from estate_fastapi.core.db import get_session
from estate_fastapi.crud.property import active_property_exists, property_crud
from estate_fastapi.schemas.property import PropertyOut

router = APIRouter()


@router.get(
    '/properties',
    tags=['properties'],
    status_code=status.HTTP_200_OK,
    response_model=list[PropertyOut],
)
async def get_properties(session: AsyncSession = Depends(get_session)):
    listings = await property_crud.get_active(session)
    return [PropertyOut.model_validate(listing) for listing in listings]


@router.get(
    '/properties/{property_id}',
    tags=['properties'],
    status_code=status.HTTP_200_OK,
    response_model=PropertyOut,
)
async def get_property(
    property_id: str,
    session: AsyncSession = Depends(get_session),
):
    listing = await active_property_exists(property_id, session)
    return PropertyOut.model_validate(listing)
