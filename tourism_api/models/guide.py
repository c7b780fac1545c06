from sqlalchemy import JSON, CheckConstraint, Column, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.user import new_id


class TouristGuide(Base):
    __tablename__ = "tourist_guides"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="RESTRICT"), unique=True, nullable=False)

    bio = Column(Text, nullable=True)
    languages = Column(JSON, nullable=False, default=list)
    price_per_hour = Column(Numeric(10, 2), nullable=False, default=0)
    rating = Column(Float, nullable=False, default=0)
    number_of_reviews = Column(Integer, nullable=False, default=0)
    availability = Column(JSON, nullable=False, default=dict)

    user = relationship("User", back_populates="guide")
    events = relationship("Event", back_populates="guide", passive_deletes=True)
    bookings = relationship("Booking", back_populates="guide")

    __table_args__ = (CheckConstraint("price_per_hour >= 0", name="check_guide_price_non_negative"),)
