import uuid
from datetime import datetime, timezone

from sqlalchemy import (Boolean, Column, DateTime, ForeignKey, Integer,
                        String, Text)
from sqlalchemy.orm import relationship

from estate_fastapi.core.constants import (MAX_LEN_LOCATION, MAX_LEN_TITLE,
                                           MAX_LEN_URL)
from estate_fastapi.core.db import Base


class Property(Base):
    id = Column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    title = Column(String(MAX_LEN_TITLE), nullable=False)
    type = Column(String(64), nullable=False)
    category = Column(String(64), nullable=False)
    sub_category = Column(String(64), nullable=True)
    price = Column(String(64), nullable=False)
    currency = Column(String(8), default='TL', nullable=False)
    location = Column(String(MAX_LEN_LOCATION), nullable=False)
    area = Column(Integer, default=0, nullable=False)
    area_net = Column(Integer, nullable=True)
    rooms = Column(String(16), default='0', nullable=False)
    bathrooms = Column(Integer, default=0, nullable=False)
    heating = Column(String(64), nullable=True)
    kitchen = Column(String(64), nullable=True)
    description = Column(Text, nullable=True)
    featured = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    photos = relationship(
        'Photo',
        back_populates='listing',
        cascade='all, delete-orphan',
        order_by='Photo.order',
    )

    @property
    def main_photo_url(self) -> str | None:
        if not self.photos:
            return None
        for photo in self.photos:
            if photo.is_main:
                return photo.url
        return self.photos[0].url

    @property
    def price_display(self) -> str:
        return f'{self.price} {self.currency}'.strip()


class Photo(Base):
    property_id = Column(
        String(36),
        ForeignKey('property.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    url = Column(String(MAX_LEN_URL), nullable=False)
    is_main = Column(Boolean, default=False)
    order = Column(Integer, default=0)

    listing = relationship('Property', back_populates='photos')
