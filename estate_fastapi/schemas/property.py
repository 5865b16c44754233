from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PhotoOut(BaseModel):
    id: int
    url: str
    is_main: bool = False
    order: int = 0
    model_config = ConfigDict(from_attributes=True)


class PropertyOut(BaseModel):
    id: str
    title: str
    type: str
    category: str
    sub_category: Optional[str] = None
    price: str
    currency: str
    location: str
    area: int
    area_net: Optional[int] = None
    rooms: str
    bathrooms: int
    heating: Optional[str] = None
    kitchen: Optional[str] = None
    description: Optional[str] = None
    featured: bool = False
    created_at: Optional[datetime] = None
    photos: List[PhotoOut] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)


class PropertyCard(BaseModel):
    """Compact listing summary embedded in assistant chat messages."""

    id: str
    title: str
    price: str
    location: str
    rooms: Optional[str] = None
    bathrooms: Optional[int] = None
    area: Optional[int] = None
    image: Optional[str] = None


class SearchCriteria(BaseModel):
    query: Optional[str] = None
    min_area: Optional[float] = Field(default=None, alias='minArea')
    max_area: Optional[float] = Field(default=None, alias='maxArea')
    rooms: Optional[str] = None
    model_config = ConfigDict(populate_by_name=True)

    @field_validator('query', 'rooms', mode='before')
    @classmethod
    def blank_to_none(cls, value):
        if value is None:
            return None
        if isinstance(value, (int, float)):
            value = str(value)
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value if value and value != '0' else None

    @field_validator('min_area', 'max_area', mode='before')
    @classmethod
    def zero_to_none(cls, value):
        if value in (None, '', 0, '0'):
            return None
        return value
