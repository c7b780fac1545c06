from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.user import new_id


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(191), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    duration = Column(Integer, nullable=False)  # hours
    max_group_size = Column(Integer, nullable=False)

    # Ownership: always a site, plus an admin and/or a guide
    touristic_site_id = Column(
        String(36),
        ForeignKey("touristic_sites.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    site_admin_id = Column(
        String(36),
        ForeignKey("touristic_site_admins.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    guide_id = Column(
        String(36),
        ForeignKey("tourist_guides.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # RELATIONSHIPS -------------------------------------

    touristic_site = relationship("TouristicSite", back_populates="events")
    site_admin = relationship("TouristicSiteAdmin", back_populates="site_events")
    guide = relationship("TouristGuide", back_populates="events")

    # Child rows go with the event (ON DELETE CASCADE)
    images = relationship(
        "EventImage",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="EventImage.created_at",
    )
    bookings = relationship(
        "Booking",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("price > 0", name="check_event_price_positive"),
        CheckConstraint("duration > 0", name="check_event_duration_positive"),
        CheckConstraint("max_group_size > 0", name="check_event_group_size_positive"),
    )
