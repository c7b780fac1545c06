from sqlalchemy import Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.user import new_id


class TouristicSiteImage(Base):
    __tablename__ = "touristic_site_images"

    id = Column(String(36), primary_key=True, default=new_id)
    url = Column(String(255), nullable=False)  # public URL, e.g. /uploads/sites/<file>
    touristic_site_id = Column(
        String(36),
        ForeignKey("touristic_sites.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    site = relationship("TouristicSite", back_populates="images")
