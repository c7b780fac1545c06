from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy.orm import Session, selectinload

from tourism_api.core.dependencies import get_db, get_storage
from tourism_api.core.exceptions import NotFoundError
from tourism_api.models.event import Event
from tourism_api.models.favorite import Favorite
from tourism_api.models.site_admin import TouristicSiteAdmin
from tourism_api.models.touristic_site import TouristicSite
from tourism_api.schemas.common import Envelope, MessageOut, Page
from tourism_api.schemas.site import (
    SiteAdminCreated,
    SiteAdminDetail,
    SiteAdminForm,
    SiteAdminOut,
    SiteOut,
    SiteWithRelations,
)
from tourism_api.services import site_admins
from tourism_api.utils.image_storage import ImageStorage
from tourism_api.utils.pagination import paginate

router = APIRouter(prefix="/tour-site", tags=["Touristic Sites"])


# --------------------------------------------------
# Multipart form -> SiteAdminForm
# --------------------------------------------------
async def site_admin_form(request: Request) -> SiteAdminForm:
    # Read raw so an explicit empty field stays "" instead of becoming None
    form = await request.form()
    return SiteAdminForm.model_validate({k: v for k, v in form.items() if isinstance(v, str)})


def _admin_with_relations(db: Session):
    return db.query(TouristicSiteAdmin).options(
        selectinload(TouristicSiteAdmin.user),
        selectinload(TouristicSiteAdmin.site).selectinload(TouristicSite.images),
    )


# =====================================================================
# CREATE SITE ADMIN (user + site + images)
# =====================================================================
@router.post("/create", response_model=Envelope[SiteAdminCreated], status_code=201)
def create_site_admin(
    form: SiteAdminForm = Depends(site_admin_form),
    site_images: Optional[List[UploadFile]] = File(None, alias="siteImages"),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    user, site = site_admins.create_site_admin(db, storage, form, site_images)

    return {
        "is_ok": True,
        "message": "Site admin and touristic site created successfully",
        "data": {"user": user, "site": site},
    }


# =====================================================================
# ALL SITES (images, favorites, events)
# =====================================================================
@router.get("/allsites", response_model=Envelope[List[SiteWithRelations]])
def get_all_sites(db: Session = Depends(get_db)):
    sites = (
        db.query(TouristicSite)
        .options(
            selectinload(TouristicSite.images),
            selectinload(TouristicSite.favorites).selectinload(Favorite.user),
            selectinload(TouristicSite.events),
        )
        .order_by(TouristicSite.created_at.desc())
        .all()
    )

    return {"is_ok": True, "message": "Touristic sites retrieved successfully", "data": sites}


# =====================================================================
# ALL SITE ADMINS (paginated, first image only)
# =====================================================================
@router.get("/all", response_model=Page[SiteAdminOut])
def get_all_site_admins(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = _admin_with_relations(db).order_by(TouristicSiteAdmin.created_at.desc())
    admins, pagination = paginate(query, page, limit)

    data = []
    for admin in admins:
        out = SiteAdminOut.model_validate(admin)
        out.site.images = out.site.images[:1]
        data.append(out)

    return {
        "is_ok": True,
        "message": "Site admins retrieved successfully",
        "data": data,
        "pagination": pagination,
    }


# =====================================================================
# SITES OF ONE ADMIN USER (paginated)
# =====================================================================
@router.get("/sites/{admin_id}", response_model=Page[SiteOut])
def get_sites_by_admin(
    admin_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    # admin_id here is the admin's *user* id
    query = (
        db.query(TouristicSite)
        .join(TouristicSite.admin)
        .filter(TouristicSiteAdmin.user_id == admin_id)
        .options(selectinload(TouristicSite.images))
        .order_by(TouristicSite.created_at.desc())
    )
    sites, pagination = paginate(query, page, limit)

    return {
        "is_ok": True,
        "message": "Touristic sites retrieved successfully",
        "data": sites,
        "pagination": pagination,
    }


# =====================================================================
# ONE SITE ADMIN
# =====================================================================
@router.get("/{admin_id}", response_model=Envelope[SiteAdminDetail])
def get_site_admin(admin_id: str, db: Session = Depends(get_db)):
    admin = (
        _admin_with_relations(db)
        .options(
            selectinload(TouristicSiteAdmin.site)
            .selectinload(TouristicSite.favorites)
            .selectinload(Favorite.user),
            selectinload(TouristicSiteAdmin.site_events).selectinload(Event.touristic_site),
            selectinload(TouristicSiteAdmin.site_events).selectinload(Event.bookings),
        )
        .filter(TouristicSiteAdmin.id == admin_id)
        .first()
    )
    if not admin:
        raise NotFoundError("Site admin not found")

    return {"is_ok": True, "message": "Site admin retrieved successfully", "data": admin}


# =====================================================================
# UPDATE SITE ADMIN
# =====================================================================
@router.put("/update/{admin_id}", response_model=Envelope[SiteAdminOut])
def update_site_admin(
    admin_id: str,
    form: SiteAdminForm = Depends(site_admin_form),
    site_images: Optional[List[UploadFile]] = File(None, alias="siteImages"),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    admin = site_admins.update_site_admin(db, storage, admin_id, form, site_images)

    return {"is_ok": True, "message": "Site admin updated successfully", "data": admin}


# =====================================================================
# DELETE SITE ADMIN (whole aggregate)
# =====================================================================
@router.delete("/delete/{admin_id}", response_model=MessageOut)
def delete_site_admin(
    admin_id: str,
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_storage),
):
    site_admins.delete_site_admin(db, storage, admin_id)

    return {"is_ok": True, "message": "Site admin and all related data deleted successfully"}
