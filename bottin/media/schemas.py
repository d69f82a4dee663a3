from datetime import datetime
from typing import Optional

from pydantic import Field

from bottin.media.models import MediaType
from bottin.schemas import CamelModel


class ProfileMediaCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    media_type: MediaType
    url: str = Field(..., min_length=1)
    description: Optional[str] = None


class ProfileMediaOut(CamelModel):
    id: int
    user_id: int
    title: str
    media_type: str
    url: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
