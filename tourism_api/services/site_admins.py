"""
Site-admin aggregate: one SITE_ADMIN user, the touristic site they run, the
bridging admin row and the site's images, created and destroyed as a unit.
"""
from typing import List, Optional, Sequence

from fastapi import UploadFile
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from tourism_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from tourism_api.core.logging_config import get_logger
from tourism_api.core.security import hash_password
from tourism_api.db.session import transaction
from tourism_api.models.enums import UserRole
from tourism_api.models.event import Event
from tourism_api.models.favorite import Favorite
from tourism_api.models.site_admin import TouristicSiteAdmin
from tourism_api.models.site_image import TouristicSiteImage
from tourism_api.models.touristic_site import TouristicSite
from tourism_api.models.user import User
from tourism_api.schemas.site import SiteAdminForm
from tourism_api.services.booking_guard import ensure_site_admin_deletable
from tourism_api.utils.image_storage import ImageStorage
from tourism_api.utils.pricing import parse_decimal

logger = get_logger().bind(log_type="admin")

SITE_IMAGES_FIELD = "siteImages"

REQUIRED_FIELDS = (
    ("name", "name"),
    ("email", "email"),
    ("password", "password"),
    ("site_name", "siteName"),
    ("site_location", "siteLocation"),
)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _parse_coordinates_and_fee(form: SiteAdminForm, errors: List[str]) -> dict:
    """
    Parse the numeric site fields that were supplied.

    Only keys present in the form appear in the result; an empty string maps
    to ``None`` (clears the column).
    """
    values = {}

    for attr, label in (("site_latitude", "siteLatitude"), ("site_longitude", "siteLongitude")):
        raw = getattr(form, attr)
        if raw is None:
            continue
        if not raw.strip():
            values[attr] = None
            continue
        try:
            values[attr] = float(raw)
        except ValueError:
            errors.append(f"{label} must be a number")

    if form.site_entry_fee is not None:
        if not form.site_entry_fee.strip():
            values["site_entry_fee"] = None
        else:
            try:
                values["site_entry_fee"] = parse_decimal(form.site_entry_fee)
            except ValueError:
                errors.append("siteEntryFee must be a number")

    return values


# =====================================================================
#                              CREATE
# =====================================================================
def create_site_admin(
    db: Session,
    storage: ImageStorage,
    form: SiteAdminForm,
    uploads: Optional[Sequence[UploadFile]] = None,
):
    missing = [label for attr, label in REQUIRED_FIELDS if _blank(getattr(form, attr))]
    if missing:
        raise ValidationError(
            "Missing required fields: name, email, password, siteName, siteLocation",
            errors=[f"{label} is required" for label in missing],
        )

    errors: List[str] = []
    numbers = _parse_coordinates_and_fee(form, errors)
    if errors:
        raise ValidationError("Validation failed", errors=errors)

    email = form.email.strip()

    # Checked before anything touches the disk
    if db.query(User).filter(User.email == email).first():
        raise ConflictError("User with this email already exists")

    hashed = hash_password(form.password)

    with storage.staged(uploads, "sites", SITE_IMAGES_FIELD) as images:
        with transaction(db):
            user = User(
                name=form.name.strip(),
                email=email,
                password=hashed,
                phone_number=form.phone_number or None,
                role=UserRole.SITE_ADMIN,
            )
            site = TouristicSite(
                name=form.site_name.strip(),
                description=(form.site_description or "").strip(),
                location=form.site_location.strip(),
                latitude=numbers.get("site_latitude"),
                longitude=numbers.get("site_longitude"),
                opening_hours=form.site_opening_hours or None,
                entry_fee=numbers.get("site_entry_fee"),
                category=form.site_category or None,
            )
            admin = TouristicSiteAdmin(user=user, site=site)

            db.add_all([user, site, admin])
            db.add_all(TouristicSiteImage(site=site, url=image.url) for image in images)

    logger.info(
        f"Site admin created | admin={admin.id} | user={user.email} | site={site.name} | images={len(images)}"
    )

    return user, site


# =====================================================================
#                              UPDATE
# =====================================================================
def update_site_admin(
    db: Session,
    storage: ImageStorage,
    admin_id: str,
    form: SiteAdminForm,
    uploads: Optional[Sequence[UploadFile]] = None,
):
    admin = db.get(TouristicSiteAdmin, admin_id)
    if not admin:
        raise NotFoundError("Site admin not found")

    errors: List[str] = []
    for attr, label in (("name", "name"), ("email", "email"), ("site_name", "siteName"), ("site_location", "siteLocation")):
        value = getattr(form, attr)
        if value is not None and not value.strip():
            errors.append(f"{label} cannot be empty")

    numbers = _parse_coordinates_and_fee(form, errors)
    if errors:
        raise ValidationError("Validation failed", errors=errors)

    user = admin.user
    site = admin.site

    if form.email is not None and form.email.strip() != user.email:
        if db.query(User).filter(User.email == form.email.strip()).first():
            raise ConflictError("Email already taken by another user")

    with storage.staged(uploads, "sites", SITE_IMAGES_FIELD) as images:
        with transaction(db):
            if form.name is not None:
                user.name = form.name.strip()
            if form.email is not None:
                user.email = form.email.strip()
            if form.phone_number is not None:
                user.phone_number = form.phone_number or None

            if form.site_name is not None:
                site.name = form.site_name.strip()
            if form.site_description is not None:
                site.description = form.site_description.strip()
            if form.site_location is not None:
                site.location = form.site_location.strip()
            if "site_latitude" in numbers:
                site.latitude = numbers["site_latitude"]
            if "site_longitude" in numbers:
                site.longitude = numbers["site_longitude"]
            if "site_entry_fee" in numbers:
                site.entry_fee = numbers["site_entry_fee"]
            if form.site_opening_hours is not None:
                site.opening_hours = form.site_opening_hours or None
            if form.site_category is not None:
                site.category = form.site_category or None

            db.add_all(TouristicSiteImage(site=site, url=image.url) for image in images)

    logger.info(f"Site admin updated | admin={admin.id} | new_images={len(images)}")

    return admin


# =====================================================================
#                              DELETE
# =====================================================================
def delete_site_admin(db: Session, storage: ImageStorage, admin_id: str) -> None:
    admin = db.get(TouristicSiteAdmin, admin_id)
    if not admin:
        raise NotFoundError("Site admin not found")

    site_id = admin.site_id
    user_id = admin.user_id

    # Every event at the site, plus any the admin owns elsewhere
    events = (
        db.query(Event)
        .options(selectinload(Event.images))
        .filter(or_(Event.touristic_site_id == site_id, Event.site_admin_id == admin_id))
        .all()
    )
    event_ids = [e.id for e in events]

    ensure_site_admin_deletable(db, event_ids)

    image_urls = [img.url for e in events for img in e.images]
    image_urls += [img.url for img in admin.site.images]

    # Strict order: nothing may outlive the row it references
    with transaction(db):
        if event_ids:
            db.query(Event).filter(Event.id.in_(event_ids)).delete(synchronize_session=False)

        db.query(TouristicSiteImage).filter(
            TouristicSiteImage.touristic_site_id == site_id
        ).delete(synchronize_session=False)

        db.query(Favorite).filter(Favorite.touristic_site_id == site_id).delete(synchronize_session=False)

        deleted = (
            db.query(TouristicSiteAdmin)
            .filter(TouristicSiteAdmin.id == admin_id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            # Lost a race with another delete of the same admin
            raise NotFoundError("Site admin not found")

        db.query(TouristicSite).filter(TouristicSite.id == site_id).delete(synchronize_session=False)
        db.query(User).filter(User.id == user_id).delete(synchronize_session=False)

    db.expunge_all()

    logger.info(f"Site admin deleted | admin={admin_id} | site={site_id} | events={len(event_ids)}")

    storage.remove_urls(image_urls)
