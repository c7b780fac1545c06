from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tourism_api.core.dependencies import get_db
from tourism_api.core.exceptions import NotFoundError
from tourism_api.models.booking import Booking
from tourism_api.schemas.booking import BookingCreate, BookingDetail, BookingOut, BookingStatusUpdate
from tourism_api.schemas.common import Envelope
from tourism_api.services import bookings as booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# =====================================================================
# CREATE BOOKING
# =====================================================================
@router.post("/create", response_model=Envelope[BookingOut], status_code=201)
def create_booking(data: BookingCreate, db: Session = Depends(get_db)):
    booking = booking_service.create_booking(db, data)

    return {"is_ok": True, "message": "Booking created successfully", "data": booking}


# =====================================================================
# GET BOOKING
# =====================================================================
@router.get("/{booking_id}", response_model=Envelope[BookingDetail])
def get_booking(booking_id: str, db: Session = Depends(get_db)):
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")

    return {"is_ok": True, "message": "Booking retrieved successfully", "data": booking}


# =====================================================================
# CHANGE STATUS (confirm / complete / cancel)
# =====================================================================
@router.put("/{booking_id}/status", response_model=Envelope[BookingOut])
def update_booking_status(booking_id: str, data: BookingStatusUpdate, db: Session = Depends(get_db)):
    booking = booking_service.update_booking_status(db, booking_id, data.status)

    return {"is_ok": True, "message": f"Booking {booking.status.value.lower()}", "data": booking}
