from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from tourism_api.models.enums import UserRole
from tourism_api.schemas.common import CamelModel


class UserBase(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(min_length=1)
    phone_number: Optional[str] = None
    profile_picture: Optional[str] = None
    role: UserRole = UserRole.TOURIST


class UserUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    profile_picture: Optional[str] = None


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class UserSummary(CamelModel):
    id: str
    name: str


class UserContact(UserSummary):
    email: str


class UserOut(UserBase):
    # Never carries the password hash
    email: str
    id: str
    phone_number: Optional[str] = None
    profile_picture: Optional[str] = None
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserProfileOut(UserOut):
    site_admin_id: Optional[str] = None
    site_id: Optional[str] = None
    guide_id: Optional[str] = None
