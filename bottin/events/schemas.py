from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from bottin.schemas import CamelModel


# ===========================
# ÉVÉNEMENTS
# ===========================
class EventBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=255)
    event_date: datetime
    image_url: Optional[str] = None
    registration_url: Optional[str] = None

    @field_validator("title", "description", "location")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v


class EventCreate(EventBase):
    organizer_id: Optional[int] = None


class EventUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    event_date: Optional[datetime] = None
    image_url: Optional[str] = None
    registration_url: Optional[str] = None
    organizer_id: Optional[int] = None

    @field_validator("title", "description", "location")
    @classmethod
    def not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Field cannot be blank")
        return v


class EventResponse(EventBase):
    id: int
    organizer_id: Optional[int] = None
    created_at: Optional[datetime] = None
