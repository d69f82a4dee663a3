from typing import Optional

from pydantic import EmailStr, Field

from bottin.auth.schemas import SocialMedia
from bottin.schemas import CamelModel


class UserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    profile_image: Optional[str] = None
    bio: Optional[str] = None
    discipline: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    social_media: Optional[SocialMedia] = None
    cv: Optional[str] = None
    is_approved: Optional[bool] = None
    is_admin: Optional[bool] = None
