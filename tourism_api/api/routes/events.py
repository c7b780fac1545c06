from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from tourism_api.core.dependencies import get_db, get_storage
from tourism_api.core.exceptions import NotFoundError, ValidationError
from tourism_api.models.booking import Booking
from tourism_api.models.enums import BookingStatus
from tourism_api.models.event import Event
from tourism_api.models.guide import TouristGuide
from tourism_api.models.site_admin import TouristicSiteAdmin
from tourism_api.models.touristic_site import TouristicSite
from tourism_api.schemas.booking import BookingDetail
from tourism_api.schemas.common import Envelope, MessageOut, Page
from tourism_api.schemas.event import EventDetail, EventForm, EventListItem, EventOut
from tourism_api.services import events as event_service
from tourism_api.utils.image_storage import ImageStorage
from tourism_api.utils.pagination import paginate

router = APIRouter(prefix="/events", tags=["Events"])

SORT_COLUMNS = {
    "createdAt": Event.created_at,
    "price": Event.price,
    "title": Event.title,
    "duration": Event.duration,
}


# --------------------------------------------------
# Multipart form -> EventForm
# --------------------------------------------------
async def event_form(request: Request) -> EventForm:
    # Read raw so an explicit empty field stays "" instead of becoming None
    form = await request.form()
    return EventForm.model_validate({k: v for k, v in form.items() if isinstance(v, str)})


def _event_summary_options():
    return (
        selectinload(Event.images),
        selectinload(Event.touristic_site),
        selectinload(Event.site_admin).selectinload(TouristicSiteAdmin.user),
        selectinload(Event.guide).selectinload(TouristGuide.user),
    )


# =====================================================================
# CREATE EVENT
# =====================================================================
@router.post("/create", response_model=Envelope[EventOut], status_code=201)
def create_event(
    form: EventForm = Depends(event_form),
    event_images: Optional[List[UploadFile]] = File(None, alias="eventImages"),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    event = event_service.create_event(db, storage, form, event_images)

    return {"is_ok": True, "message": "Event created successfully", "data": event}


# =====================================================================
# LIST EVENTS (search, filters, sort, pagination)
# =====================================================================
@router.get("/all", response_model=Page[EventListItem])
def get_all_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    site_id: Optional[str] = Query(None, alias="siteId"),
    admin_id: Optional[str] = Query(None, alias="adminId"),
    guide_id: Optional[str] = Query(None, alias="guideId"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db),
):
    if sort_by not in SORT_COLUMNS:
        raise ValidationError(
            "Validation failed",
            errors=[f"sortBy must be one of: {', '.join(SORT_COLUMNS)}"],
        )
    if sort_order not in ("asc", "desc"):
        raise ValidationError("Validation failed", errors=["sortOrder must be 'asc' or 'desc'"])

    query = db.query(Event).join(Event.touristic_site)

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Event.title.ilike(pattern),
                Event.description.ilike(pattern),
                TouristicSite.name.ilike(pattern),
            )
        )
    if site_id:
        query = query.filter(Event.touristic_site_id == site_id)
    if admin_id:
        query = query.filter(Event.site_admin_id == admin_id)
    if guide_id:
        query = query.filter(Event.guide_id == guide_id)

    column = SORT_COLUMNS[sort_by]
    query = query.options(*_event_summary_options(), selectinload(Event.bookings)).order_by(
        column.asc() if sort_order == "asc" else column.desc()
    )

    events, pagination = paginate(query, page, limit)

    return {
        "is_ok": True,
        "message": "Events retrieved successfully",
        "data": events,
        "pagination": pagination,
    }


# =====================================================================
# EVENTS OWNED BY A SITE ADMIN
# =====================================================================
@router.get("/siteadmin/events/{admin_id}", response_model=Envelope[List[EventListItem]])
def get_site_admin_events(admin_id: str, db: Session = Depends(get_db)):
    if not db.get(TouristicSiteAdmin, admin_id):
        raise NotFoundError("Site admin not found")

    events = (
        db.query(Event)
        .options(*_event_summary_options(), selectinload(Event.bookings))
        .filter(Event.site_admin_id == admin_id)
        .order_by(Event.created_at.desc())
        .all()
    )

    return {"is_ok": True, "message": "Events retrieved successfully", "data": events}


# =====================================================================
# BOOKINGS OF ONE EVENT
# =====================================================================
@router.get("/{event_id}/bookings", response_model=Page[BookingDetail])
def get_event_bookings(
    event_id: str,
    status: Optional[BookingStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    if not db.get(Event, event_id):
        raise NotFoundError("Event not found")

    query = (
        db.query(Booking)
        .options(selectinload(Booking.tourist), selectinload(Booking.payment))
        .filter(Booking.event_id == event_id)
    )
    if status:
        query = query.filter(Booking.status == status)

    bookings, pagination = paginate(query.order_by(Booking.created_at.desc()), page, limit)

    return {
        "is_ok": True,
        "message": "Bookings retrieved successfully",
        "data": bookings,
        "pagination": pagination,
    }


# =====================================================================
# ONE EVENT
# =====================================================================
@router.get("/{event_id}", response_model=Envelope[EventDetail])
def get_event(event_id: str, db: Session = Depends(get_db)):
    event = (
        db.query(Event)
        .options(
            *_event_summary_options(),
            selectinload(Event.bookings).selectinload(Booking.tourist),
            selectinload(Event.bookings).selectinload(Booking.payment),
        )
        .filter(Event.id == event_id)
        .first()
    )
    if not event:
        raise NotFoundError("Event not found")

    return {"is_ok": True, "message": "Event retrieved successfully", "data": event}


# =====================================================================
# UPDATE EVENT
# =====================================================================
@router.put("/update/{event_id}", response_model=Envelope[EventOut])
def update_event(
    event_id: str,
    form: EventForm = Depends(event_form),
    images_to_remove: Optional[str] = Form(None, alias="imagesToRemove"),
    event_images: Optional[List[UploadFile]] = File(None, alias="eventImages"),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    event = event_service.update_event(db, storage, event_id, form, event_images, images_to_remove)

    return {"is_ok": True, "message": "Event updated successfully", "data": event}


# =====================================================================
# DELETE EVENT
# =====================================================================
@router.delete("/delete/{event_id}", response_model=MessageOut)
def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    event_service.delete_event(db, storage, event_id)

    return {"is_ok": True, "message": "Event deleted successfully"}
