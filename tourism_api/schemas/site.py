from datetime import datetime
from typing import List, Optional

from tourism_api.models.enums import BookingStatus
from tourism_api.schemas.common import CamelModel
from tourism_api.schemas.user import UserOut, UserSummary


class SiteAdminForm(CamelModel):
    """Raw multipart fields of the site-admin create/update forms."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None
    site_name: Optional[str] = None
    site_description: Optional[str] = None
    site_location: Optional[str] = None
    site_latitude: Optional[str] = None
    site_longitude: Optional[str] = None
    site_opening_hours: Optional[str] = None
    site_entry_fee: Optional[str] = None
    site_category: Optional[str] = None


class SiteImageOut(CamelModel):
    id: str
    url: str
    created_at: Optional[datetime] = None


class SiteOut(CamelModel):
    id: str
    name: str
    description: str
    location: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    category: Optional[str] = None
    opening_hours: Optional[str] = None
    entry_fee: Optional[float] = None
    created_at: Optional[datetime] = None
    images: List[SiteImageOut] = []


class FavoriteOut(CamelModel):
    id: str
    user: UserSummary


class EventBrief(CamelModel):
    id: str
    title: str
    price: float


class SiteWithRelations(SiteOut):
    favorites: List[FavoriteOut] = []
    events: List[EventBrief] = []


class SiteAdminCreated(CamelModel):
    user: UserOut
    site: SiteOut


class SiteAdminOut(CamelModel):
    id: str
    user_id: str
    site_id: str
    created_at: Optional[datetime] = None
    user: UserOut
    site: SiteOut


class BookingStatusBrief(CamelModel):
    id: str
    status: BookingStatus


class SiteNameOut(CamelModel):
    name: str


class AdminEventOut(CamelModel):
    id: str
    title: str
    price: float
    duration: int
    max_group_size: int
    created_at: Optional[datetime] = None
    touristic_site: SiteNameOut
    bookings: List[BookingStatusBrief] = []


class SiteAdminDetail(SiteAdminOut):
    site: SiteWithRelations
    site_events: List[AdminEventOut] = []
