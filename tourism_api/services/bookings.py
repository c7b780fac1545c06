from datetime import timezone

from sqlalchemy.orm import Session

from tourism_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from tourism_api.core.logging_config import get_logger
from tourism_api.db.session import transaction
from tourism_api.models.booking import Booking
from tourism_api.models.enums import BookingStatus
from tourism_api.models.event import Event
from tourism_api.models.guide import TouristGuide
from tourism_api.models.user import User
from tourism_api.schemas.booking import BookingCreate
from tourism_api.utils.pricing import calculate_booking_price

logger = get_logger().bind(log_type="booking")

# COMPLETED and CANCELED are terminal
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELED},
}


def create_booking(db: Session, data: BookingCreate) -> Booking:
    event = db.get(Event, data.event_id)
    if not event:
        raise NotFoundError("Event not found")

    if not db.get(User, data.tourist_id):
        raise NotFoundError("Tourist not found")

    # Fall back to the event's own guide
    guide_id = data.guide_id or event.guide_id
    if not guide_id:
        raise ValidationError("Validation failed", errors=["Guide ID is required for events without a guide"])

    if not db.get(TouristGuide, guide_id):
        raise NotFoundError("Guide not found")

    if data.number_of_people > event.max_group_size:
        raise ValidationError(
            "Validation failed",
            errors=[f"Number of people exceeds the maximum group size of {event.max_group_size}"],
        )

    booking_date = data.booking_date
    if booking_date.tzinfo is not None:
        booking_date = booking_date.astimezone(timezone.utc).replace(tzinfo=None)

    with transaction(db):
        booking = Booking(
            tourist_id=data.tourist_id,
            event_id=event.id,
            guide_id=guide_id,
            booking_date=booking_date,
            number_of_people=data.number_of_people,
            status=BookingStatus.PENDING,
            total_price=calculate_booking_price(event, data.number_of_people),
        )
        db.add(booking)

    logger.info(
        f"Booking created | booking={booking.id} | event={event.id} | people={booking.number_of_people} | total={booking.total_price}"
    )

    return booking


def update_booking_status(db: Session, booking_id: str, new_status: BookingStatus) -> Booking:
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")

    old_status = booking.status
    if new_status not in ALLOWED_TRANSITIONS.get(old_status, set()):
        raise ConflictError(f"Cannot change booking status from {old_status.value} to {new_status.value}")

    with transaction(db):
        booking.status = new_status

    logger.info(f"Booking status changed | booking={booking.id} | {old_status.value} -> {new_status.value}")

    return booking
