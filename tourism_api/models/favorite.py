from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.user import new_id


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    touristic_site_id = Column(
        String(36),
        ForeignKey("touristic_sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="favorites")
    site = relationship("TouristicSite", back_populates="favorites")

    __table_args__ = (UniqueConstraint("user_id", "touristic_site_id", name="uq_favorite_user_site"),)
