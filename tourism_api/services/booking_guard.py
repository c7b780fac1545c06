"""
Rules that block destructive operations while bookings are still live.

An *active* booking is one in PENDING or CONFIRMED state. Every check here
runs before the caller writes anything.
"""
from typing import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from tourism_api.core.exceptions import ActiveBookingsError
from tourism_api.models.booking import Booking
from tourism_api.models.enums import ACTIVE_BOOKING_STATUSES


def count_active_bookings(db: Session, event_ids: Sequence[str]) -> int:
    if not event_ids:
        return 0

    return (
        db.query(func.count(Booking.id))
        .filter(
            Booking.event_id.in_(list(event_ids)),
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        )
        .scalar()
    ) or 0


def ensure_event_deletable(db: Session, event_id: str) -> None:
    active = count_active_bookings(db, [event_id])
    if active:
        raise ActiveBookingsError(
            f"Cannot delete event with {active} active booking(s). Please cancel all bookings first.",
            active_bookings=active,
        )


def ensure_site_admin_deletable(db: Session, event_ids: Sequence[str]) -> None:
    if count_active_bookings(db, event_ids):
        raise ActiveBookingsError(
            "Cannot delete site admin with active bookings. Please handle the bookings first."
        )


def ensure_guide_deletable(db: Session, guide_id: str) -> None:
    # bookings.guide_id is RESTRICT, so any booking at all pins the guide
    total = db.query(func.count(Booking.id)).filter(Booking.guide_id == guide_id).scalar() or 0
    if total:
        raise ActiveBookingsError(
            f"Cannot delete guide with {total} booking(s). Please handle the bookings first."
        )
