"""Importing this package registers every table on ``Base.metadata``."""
from tourism_api.models.user import User
from tourism_api.models.touristic_site import TouristicSite
from tourism_api.models.site_admin import TouristicSiteAdmin
from tourism_api.models.site_image import TouristicSiteImage
from tourism_api.models.favorite import Favorite
from tourism_api.models.guide import TouristGuide
from tourism_api.models.event import Event
from tourism_api.models.event_image import EventImage
from tourism_api.models.booking import Booking
from tourism_api.models.payment import Payment
from tourism_api.models.review import Review

__all__ = [
    "User",
    "TouristicSite",
    "TouristicSiteAdmin",
    "TouristicSiteImage",
    "Favorite",
    "TouristGuide",
    "Event",
    "EventImage",
    "Booking",
    "Payment",
    "Review",
]
