from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from tourism_api.core.dependencies import get_db
from tourism_api.core.exceptions import NotFoundError
from tourism_api.models.guide import TouristGuide
from tourism_api.schemas.common import Envelope, MessageOut
from tourism_api.schemas.guide import GuideCreate, GuideOut, GuideUpdate
from tourism_api.services import guides as guide_service

router = APIRouter(prefix="/guides", tags=["Tourist Guides"])


# =====================================================================
# CREATE GUIDE (user + guide profile)
# =====================================================================
@router.post("/create", response_model=Envelope[GuideOut], status_code=201)
def create_guide(data: GuideCreate, db: Session = Depends(get_db)):
    guide = guide_service.create_guide(db, data)

    return {"is_ok": True, "message": "Guide created successfully", "data": guide}


# =====================================================================
# LIST / GET
# =====================================================================
@router.get("/all", response_model=Envelope[List[GuideOut]])
def get_all_guides(db: Session = Depends(get_db)):
    guides = (
        db.query(TouristGuide)
        .options(selectinload(TouristGuide.user))
        .order_by(TouristGuide.rating.desc())
        .all()
    )

    return {"is_ok": True, "message": "Guides retrieved successfully", "data": guides}


@router.get("/{guide_id}", response_model=Envelope[GuideOut])
def get_guide(guide_id: str, db: Session = Depends(get_db)):
    guide = db.get(TouristGuide, guide_id)
    if not guide:
        raise NotFoundError("Guide not found")

    return {"is_ok": True, "message": "Guide retrieved successfully", "data": guide}


# =====================================================================
# UPDATE GUIDE
# =====================================================================
@router.put("/update/{guide_id}", response_model=Envelope[GuideOut])
def update_guide(guide_id: str, data: GuideUpdate, db: Session = Depends(get_db)):
    guide = guide_service.update_guide(db, guide_id, data)

    return {"is_ok": True, "message": "Guide updated successfully", "data": guide}


# =====================================================================
# DELETE GUIDE
# =====================================================================
@router.delete("/delete/{guide_id}", response_model=MessageOut)
def delete_guide(guide_id: str, db: Session = Depends(get_db)):
    guide_service.delete_guide(db, guide_id)

    return {"is_ok": True, "message": "Guide deleted successfully"}
