from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from bottin.db.session import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    event_date = Column(DateTime(timezone=True), nullable=False, index=True)
    image_url = Column(Text, nullable=True)
    registration_url = Column(Text, nullable=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Event(id={self.id}, title='{self.title}', date='{self.event_date}')>"
