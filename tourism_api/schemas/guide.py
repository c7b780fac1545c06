from typing import Any, List, Optional

from pydantic import EmailStr, Field

from tourism_api.schemas.common import CamelModel
from tourism_api.schemas.user import UserOut


class GuideCreate(CamelModel):
    # User fields
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    phone_number: Optional[str] = None
    profile_picture: Optional[str] = None

    # Guide profile
    bio: Optional[str] = None
    languages: List[str] = Field(min_length=1)
    price_per_hour: float = Field(ge=0, lt=100_000_000)
    availability: Any


class GuideUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    profile_picture: Optional[str] = None

    bio: Optional[str] = None
    languages: Optional[List[str]] = None
    price_per_hour: Optional[float] = Field(default=None, ge=0, lt=100_000_000)
    availability: Optional[Any] = None


class GuideOut(CamelModel):
    id: str
    user_id: str
    bio: Optional[str] = None
    languages: List[str]
    price_per_hour: float
    rating: float
    number_of_reviews: int
    availability: Any
    user: UserOut
