from sqlalchemy import Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.user import new_id


class TouristicSiteAdmin(Base):
    """Bridges one SITE_ADMIN user to the one site they administer."""

    __tablename__ = "touristic_site_admins"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="RESTRICT"), unique=True, nullable=False)
    site_id = Column(String(36), ForeignKey("touristic_sites.id", ondelete="RESTRICT"), unique=True, nullable=False)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="site_admin")
    site = relationship("TouristicSite", back_populates="admin")

    # Events created by this admin (their site_admin_id is nulled if the admin goes away)
    site_events = relationship(
        "Event",
        back_populates="site_admin",
        passive_deletes=True,
        order_by="Event.created_at.desc()",
    )
