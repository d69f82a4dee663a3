from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from bottin.schemas import CamelModel


class MessageCreate(CamelModel):
    receiver_id: int
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("content")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Le message ne peut pas être vide")
        return v


class MessageOut(CamelModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool = False
    created_at: Optional[datetime] = None


class UnreadCount(CamelModel):
    count: int
