from sqlalchemy import Column, DateTime, Enum, ForeignKey, Numeric, String, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.enums import PaymentStatus
from tourism_api.models.user import new_id


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=new_id)
    booking_id = Column(String(36), ForeignKey("bookings.id", ondelete="CASCADE"), unique=True, nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(10), nullable=False)
    method = Column(String(50), nullable=True)
    transaction_id = Column(String(191), unique=True, nullable=True)
    status = Column(Enum(PaymentStatus, name="paymentstatus"), nullable=False, default=PaymentStatus.PENDING, index=True)

    payment_date = Column(DateTime, nullable=False, server_default=func.now())
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    booking = relationship("Booking", back_populates="payment")
