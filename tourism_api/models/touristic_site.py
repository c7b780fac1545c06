from sqlalchemy import Column, DateTime, Float, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.user import new_id


class TouristicSite(Base):
    __tablename__ = "touristic_sites"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(191), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(191), nullable=False, index=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    category = Column(String(191), nullable=True)
    opening_hours = Column(String(191), nullable=True)
    entry_fee = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # RELATIONSHIPS -------------------------------------

    admin = relationship("TouristicSiteAdmin", back_populates="site", uselist=False)

    images = relationship(
        "TouristicSiteImage",
        back_populates="site",
        order_by="TouristicSiteImage.created_at",
    )

    favorites = relationship("Favorite", back_populates="site", cascade="all, delete-orphan", passive_deletes=True)

    events = relationship("Event", back_populates="touristic_site")
