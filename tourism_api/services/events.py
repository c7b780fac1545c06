"""
Event aggregate: an event row plus its images.

Creation and update validate the multipart fields, resolve the referenced
site/admin/guide, then write rows and images in one transaction. Files are
staged first and only promoted once the rows are committed.
"""
import json
from decimal import Decimal
from typing import List, Optional, Sequence

from fastapi import UploadFile
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from tourism_api.core.exceptions import NotFoundError, ValidationError
from tourism_api.core.logging_config import get_logger
from tourism_api.db.session import transaction
from tourism_api.models.event import Event
from tourism_api.models.event_image import EventImage
from tourism_api.models.guide import TouristGuide
from tourism_api.models.site_admin import TouristicSiteAdmin
from tourism_api.models.touristic_site import TouristicSite
from tourism_api.schemas.event import EventForm
from tourism_api.services.booking_guard import ensure_event_deletable
from tourism_api.utils.image_storage import ImageStorage
from tourism_api.utils.pricing import parse_decimal

logger = get_logger().bind(log_type="event")

EVENT_IMAGES_FIELD = "eventImages"


def _parse_price(value: Optional[str]) -> Optional[Decimal]:
    try:
        price = parse_decimal(value)
    except ValueError:
        return None
    return price if price > 0 else None


def _parse_positive_int(value: Optional[str]) -> Optional[int]:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _parse_image_ids(raw: Optional[str], errors: List[str]) -> List[str]:
    """``imagesToRemove`` arrives as a JSON-encoded list of image ids."""
    if raw is None or not raw.strip():
        return []

    try:
        ids = json.loads(raw)
    except json.JSONDecodeError:
        ids = None

    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        errors.append("imagesToRemove must be a JSON array of image IDs")
        return []

    return ids


def _validate_new_event(form: EventForm):
    errors: List[str] = []
    values = {}

    if not form.title or not form.title.strip():
        errors.append("Title is required")
    else:
        values["title"] = form.title.strip()

    if not form.description or not form.description.strip():
        errors.append("Description is required")
    else:
        values["description"] = form.description.strip()

    values["price"] = _parse_price(form.price)
    if values["price"] is None:
        errors.append("Valid price is required")

    values["duration"] = _parse_positive_int(form.duration)
    if values["duration"] is None:
        errors.append("Valid duration is required")

    values["max_group_size"] = _parse_positive_int(form.max_group_size)
    if values["max_group_size"] is None:
        errors.append("Valid max group size is required")

    if not form.touristic_site_id or not form.touristic_site_id.strip():
        errors.append("Touristic site ID is required")

    admin_id = (form.site_admin_id or "").strip()
    guide_id = (form.guide_id or "").strip()
    if not admin_id and not guide_id:
        errors.append("Either site admin ID or guide ID is required")

    return errors, values


def _validate_event_changes(form: EventForm):
    """Same rules as creation, but only for the fields that were sent."""
    errors: List[str] = []
    values = {}

    if form.title is not None:
        if not form.title.strip():
            errors.append("Title cannot be empty")
        else:
            values["title"] = form.title.strip()

    if form.description is not None:
        if not form.description.strip():
            errors.append("Description cannot be empty")
        else:
            values["description"] = form.description.strip()

    if form.price is not None:
        price = _parse_price(form.price)
        if price is None:
            errors.append("Valid price is required")
        else:
            values["price"] = price

    if form.duration is not None:
        duration = _parse_positive_int(form.duration)
        if duration is None:
            errors.append("Valid duration is required")
        else:
            values["duration"] = duration

    if form.max_group_size is not None:
        size = _parse_positive_int(form.max_group_size)
        if size is None:
            errors.append("Valid max group size is required")
        else:
            values["max_group_size"] = size

    if form.touristic_site_id is not None and not form.touristic_site_id.strip():
        errors.append("Touristic site ID cannot be empty")

    return errors, values


def _get_site(db: Session, site_id: str) -> TouristicSite:
    site = db.get(TouristicSite, site_id.strip())
    if not site:
        raise NotFoundError("Touristic site not found")
    return site


def _get_admin(db: Session, admin_id: str) -> TouristicSiteAdmin:
    admin = db.get(TouristicSiteAdmin, admin_id.strip())
    if not admin:
        raise NotFoundError("Site admin not found")
    return admin


def _get_guide(db: Session, guide_id: str) -> TouristGuide:
    guide = db.get(TouristGuide, guide_id.strip())
    if not guide:
        raise NotFoundError("Guide not found")
    return guide


# =====================================================================
#                              CREATE
# =====================================================================
def create_event(
    db: Session,
    storage: ImageStorage,
    form: EventForm,
    uploads: Optional[Sequence[UploadFile]] = None,
) -> Event:
    errors, values = _validate_new_event(form)
    if errors:
        raise ValidationError("Validation failed", errors=errors)

    site = _get_site(db, form.touristic_site_id)
    admin = _get_admin(db, form.site_admin_id) if (form.site_admin_id or "").strip() else None
    guide = _get_guide(db, form.guide_id) if (form.guide_id or "").strip() else None

    with storage.staged(uploads, "events", EVENT_IMAGES_FIELD) as images:
        with transaction(db):
            event = Event(
                **values,
                touristic_site=site,
                site_admin=admin,
                guide=guide,
                images=[EventImage(url=image.url) for image in images],
            )
            db.add(event)

    logger.info(f"Event created | event={event.id} | site={site.id} | images={len(images)}")

    return event


# =====================================================================
#                              UPDATE
# =====================================================================
def update_event(
    db: Session,
    storage: ImageStorage,
    event_id: str,
    form: EventForm,
    uploads: Optional[Sequence[UploadFile]] = None,
    images_to_remove: Optional[str] = None,
) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")

    errors, values = _validate_event_changes(form)
    remove_ids = _parse_image_ids(images_to_remove, errors)
    if errors:
        raise ValidationError("Validation failed", errors=errors)

    if form.touristic_site_id is not None:
        values["touristic_site"] = _get_site(db, form.touristic_site_id)

    # Empty string disconnects, any other value must exist
    if form.site_admin_id is not None:
        values["site_admin"] = _get_admin(db, form.site_admin_id) if form.site_admin_id.strip() else None
    if form.guide_id is not None:
        values["guide"] = _get_guide(db, form.guide_id) if form.guide_id.strip() else None

    # Ids belonging to other events are ignored
    removed = []
    if remove_ids:
        removed = (
            db.query(EventImage)
            .filter(EventImage.id.in_(remove_ids), EventImage.event_id == event.id)
            .all()
        )
    removed_urls = [img.url for img in removed]

    with storage.staged(uploads, "events", EVENT_IMAGES_FIELD) as images:
        with transaction(db):
            for img in removed:
                event.images.remove(img)

            for key, value in values.items():
                setattr(event, key, value)

            for image in images:
                event.images.append(EventImage(url=image.url))

            event.updated_at = func.now()

    logger.info(
        f"Event updated | event={event.id} | fields={sorted(values)} | added={len(images)} | removed={len(removed)}"
    )

    storage.remove_urls(removed_urls)

    return event


# =====================================================================
#                              DELETE
# =====================================================================
def delete_event(db: Session, storage: ImageStorage, event_id: str) -> None:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")

    ensure_event_deletable(db, event_id)

    image_urls = [img.url for img in event.images]

    try:
        with transaction(db):
            db.delete(event)
    except StaleDataError:
        # Someone else removed it between our read and our delete
        raise NotFoundError("Event not found")

    logger.info(f"Event deleted | event={event_id} | images={len(image_urls)}")

    storage.remove_urls(image_urls)
