from datetime import datetime
from typing import Optional

from pydantic import Field

from tourism_api.models.enums import BookingStatus, PaymentStatus
from tourism_api.schemas.common import CamelModel
from tourism_api.schemas.user import UserContact


class BookingCreate(CamelModel):
    tourist_id: str
    event_id: str
    guide_id: Optional[str] = None
    booking_date: datetime
    number_of_people: int = Field(gt=0)


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class PaymentSummary(CamelModel):
    id: str
    status: PaymentStatus
    amount: float


class BookingOut(CamelModel):
    id: str
    tourist_id: str
    event_id: str
    guide_id: str
    booking_date: datetime
    number_of_people: int
    status: BookingStatus
    total_price: float
    created_at: Optional[datetime] = None


class BookingDetail(BookingOut):
    tourist: UserContact
    payment: Optional[PaymentSummary] = None
