from datetime import datetime
from typing import List, Optional

from tourism_api.schemas.booking import BookingDetail, BookingOut
from tourism_api.schemas.common import CamelModel
from tourism_api.schemas.user import UserContact, UserSummary


class EventForm(CamelModel):
    """Raw multipart fields of the event create/update forms."""

    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[str] = None
    duration: Optional[str] = None
    max_group_size: Optional[str] = None
    touristic_site_id: Optional[str] = None
    site_admin_id: Optional[str] = None
    guide_id: Optional[str] = None


class EventImageOut(CamelModel):
    id: str
    url: str


class SiteSummary(CamelModel):
    id: str
    name: str
    location: str


class SiteDetailSummary(SiteSummary):
    description: str
    opening_hours: Optional[str] = None
    entry_fee: Optional[float] = None


class AdminSummary(CamelModel):
    id: str
    user: UserSummary


class AdminContact(CamelModel):
    id: str
    user: UserContact


class GuideSummary(CamelModel):
    id: str
    user: UserSummary


class GuideContact(CamelModel):
    id: str
    user: UserContact
    rating: float
    price_per_hour: float


class EventOut(CamelModel):
    id: str
    title: str
    description: str
    price: float
    duration: int
    max_group_size: int
    touristic_site_id: str
    site_admin_id: Optional[str] = None
    guide_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    images: List[EventImageOut] = []
    touristic_site: SiteSummary
    site_admin: Optional[AdminSummary] = None
    guide: Optional[GuideSummary] = None


class EventListItem(EventOut):
    bookings: List[BookingOut] = []


class EventDetail(EventOut):
    touristic_site: SiteDetailSummary
    site_admin: Optional[AdminContact] = None
    guide: Optional[GuideContact] = None
    bookings: List[BookingDetail] = []
