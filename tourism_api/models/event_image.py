from sqlalchemy import Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from tourism_api.db.session import Base
from tourism_api.models.user import new_id


class EventImage(Base):
    __tablename__ = "event_images"

    id = Column(String(36), primary_key=True, default=new_id)
    url = Column(String(255), nullable=False)  # public URL, e.g. /uploads/events/<file>
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    event = relationship("Event", back_populates="images")
