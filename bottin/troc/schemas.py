from datetime import datetime
from typing import List, Optional

from pydantic import Field, computed_field, field_validator

from bottin.schemas import CamelModel
from bottin.troc.images import clean_image_urls, join_image_urls, split_image_urls
from bottin.troc.models import TrocCategory


def _check_urls(urls: Optional[List[str]]) -> Optional[List[str]]:
    if urls is None:
        return None
    for url in urls:
        if "," in url:
            raise ValueError("Image URLs cannot contain commas")
        # L'URL est conservée telle quelle: pas d'espaces autour, pas de vide
        if not url.strip() or url != url.strip():
            raise ValueError("Image URLs cannot be blank or padded with whitespace")
    return clean_image_urls(urls)


class TrocImagesInput(CamelModel):
    # imageUrl: ancien format "url1,url2"; imageUrls: liste
    image_url: Optional[str] = None
    image_urls: Optional[List[str]] = None

    @field_validator("image_urls")
    @classmethod
    def validate_image_urls(cls, v):
        return _check_urls(v)

    def requested_images(self) -> Optional[List[str]]:
        """Liste d'images demandée, ou None si le client n'en a pas fourni."""
        if self.image_urls is not None:
            return self.image_urls
        if self.image_url is not None:
            return split_image_urls(self.image_url)
        return None


class TrocAdCreate(TrocImagesInput):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category: TrocCategory
    assigned_user_id: Optional[int] = None

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v


class TrocAdUpdate(TrocImagesInput):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[TrocCategory] = None
    append_image_urls: Optional[List[str]] = None
    remove_image_urls: Optional[List[str]] = None
    assigned_user_id: Optional[int] = None

    @field_validator("append_image_urls", "remove_image_urls")
    @classmethod
    def validate_url_lists(cls, v):
        return _check_urls(v)

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Field cannot be blank")
        return v


class TrocAdOut(CamelModel):
    id: int
    title: str
    description: str
    category: str
    user_id: int
    image_urls: List[str] = []
    created_at: Optional[datetime] = None

    @field_validator("image_urls", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []

    @computed_field(alias="imageUrl")
    @property
    def image_url(self) -> Optional[str]:
        return join_image_urls(self.image_urls)
