import uuid

from sqlalchemy import Column, DateTime, Enum, String, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.enums import UserRole


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(191), unique=True, index=True, nullable=False)
    name = Column(String(191), nullable=False)
    password = Column(String(255), nullable=False)  # argon2 hash
    phone_number = Column(String(50), nullable=True)
    profile_picture = Column(String(255), nullable=True)
    role = Column(Enum(UserRole, name="userrole"), nullable=False, default=UserRole.TOURIST)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # At most one of these exists, matching the role
    site_admin = relationship("TouristicSiteAdmin", back_populates="user", uselist=False)
    guide = relationship("TouristGuide", back_populates="user", uselist=False)

    favorites = relationship("Favorite", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    bookings = relationship("Booking", back_populates="tourist")
