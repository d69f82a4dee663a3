from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text

from bottin.db.session import Base


class TrocCategory(str, Enum):
    COLLABORATION = "collaboration"
    EQUIPMENT = "equipment"
    SERVICE = "service"
    EVENT = "event"


class TrocAd(Base):
    __tablename__ = "troc_ads"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    image_urls = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<TrocAd(id={self.id}, title='{self.title}', user_id={self.user_id})>"
