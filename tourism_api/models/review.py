from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.user import new_id


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, default=new_id)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    tourist_id = Column(String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    booking_id = Column(String(36), ForeignKey("bookings.id", ondelete="CASCADE"), unique=True, nullable=False)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    booking = relationship("Booking", back_populates="review")

    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="check_review_rating_range"),)
