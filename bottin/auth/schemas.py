from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from bottin.schemas import CamelModel
from bottin.utils.avatar import DEFAULT_PROFILE_IMAGES


class SocialMedia(CamelModel):
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    youtube: Optional[str] = None
    spotify: Optional[str] = None
    behance: Optional[str] = None
    linkedin: Optional[str] = None
    other: Optional[str] = None


class UserOut(CamelModel):
    """Utilisateur tel que renvoyé par l'API (jamais le mot de passe)."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    profile_image: Optional[str] = None
    bio: Optional[str] = None
    discipline: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    social_media: Optional[SocialMedia] = None
    cv: Optional[str] = None
    is_approved: bool = False
    is_admin: bool = False
    created_at: Optional[datetime] = None


class UserRegister(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = None
    discipline: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    social_media: Optional[SocialMedia] = None
    cv: Optional[str] = None
    default_profile_image: Optional[str] = None

    @field_validator("username")
    @classmethod
    def username_format(cls, v):
        v = v.strip()
        if " " in v:
            raise ValueError("Le nom d'utilisateur ne doit pas contenir d'espaces")
        return v

    @field_validator("default_profile_image")
    @classmethod
    def known_default_image(cls, v):
        if v is not None and v not in DEFAULT_PROFILE_IMAGES:
            raise ValueError("Image de profil par défaut inconnue")
        return v


class UserLogin(CamelModel):
    username: str  # nom d'utilisateur ou email
    password: str

    @field_validator("username", "password")
    @classmethod
    def required(cls, v):
        if not v or v.strip() == "":
            raise ValueError("Username and password are required")
        return v


class PasswordResetRequest(CamelModel):
    email: EmailStr


class PasswordReset(CamelModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class MessageResponse(CamelModel):
    message: str
