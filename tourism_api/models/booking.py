from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.enums import BookingStatus
from tourism_api.models.user import new_id


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=new_id)
    tourist_id = Column(String(36), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    guide_id = Column(String(36), ForeignKey("tourist_guides.id", ondelete="RESTRICT"), nullable=False, index=True)

    booking_date = Column(DateTime, nullable=False)
    number_of_people = Column(Integer, nullable=False)

    status = Column(
        Enum(BookingStatus, name="bookingstatus"),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    total_price = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    tourist = relationship("User", back_populates="bookings")
    event = relationship("Event", back_populates="bookings")
    guide = relationship("TouristGuide", back_populates="bookings")

    payment = relationship("Payment", back_populates="booking", uselist=False, passive_deletes=True)
    review = relationship("Review", back_populates="booking", uselist=False, passive_deletes=True)

    __table_args__ = (CheckConstraint("number_of_people > 0", name="check_booking_people_positive"),)
