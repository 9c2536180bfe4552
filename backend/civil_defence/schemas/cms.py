"""
CMS Schemas Module
==================

Create / update / response models for landing-page content.
Update models make every field optional.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

LANGUAGE_PATTERN = r"^[a-z]{2}(-[A-Z]{2})?$"


class _Response(BaseModel):
    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ==========================
# Translations
# ==========================

class TranslationCreate(BaseModel):
    key: str = Field(..., min_length=1, max_length=255, pattern=r"^[A-Za-z0-9_.\-]+$")
    language: str = Field(..., pattern=LANGUAGE_PATTERN, examples=["en", "or"])
    value: str
    category: Optional[str] = Field(default=None, max_length=100)


class TranslationUpdate(BaseModel):
    key: Optional[str] = Field(default=None, min_length=1, max_length=255, pattern=r"^[A-Za-z0-9_.\-]+$")
    language: Optional[str] = Field(default=None, pattern=LANGUAGE_PATTERN)
    value: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)


class TranslationResponse(_Response):
    key: str
    language: str
    value: str
    category: Optional[str] = None


# ==========================
# Hero banners
# ==========================

class HeroBannerCreate(BaseModel):
    title_en: str = Field(..., min_length=1, max_length=255)
    title_or: str = Field(..., min_length=1, max_length=255)
    subtitle_en: str
    subtitle_or: str
    image_url: str = Field(..., min_length=1, max_length=500)
    button_text_en: Optional[str] = Field(default=None, max_length=100)
    button_text_or: Optional[str] = Field(default=None, max_length=100)
    button_link: Optional[str] = Field(default=None, max_length=500)
    order: int = 0
    is_active: bool = True


class HeroBannerUpdate(BaseModel):
    title_en: Optional[str] = Field(default=None, min_length=1, max_length=255)
    title_or: Optional[str] = Field(default=None, min_length=1, max_length=255)
    subtitle_en: Optional[str] = None
    subtitle_or: Optional[str] = None
    image_url: Optional[str] = Field(default=None, min_length=1, max_length=500)
    button_text_en: Optional[str] = Field(default=None, max_length=100)
    button_text_or: Optional[str] = Field(default=None, max_length=100)
    button_link: Optional[str] = Field(default=None, max_length=500)
    order: Optional[int] = None
    is_active: Optional[bool] = None


class HeroBannerResponse(_Response):
    title_en: str
    title_or: str
    subtitle_en: str
    subtitle_or: str
    image_url: str
    button_text_en: Optional[str] = None
    button_text_or: Optional[str] = None
    button_link: Optional[str] = None
    order: int
    is_active: bool


# ==========================
# About content
# ==========================

class AboutContentCreate(BaseModel):
    section: str = Field(..., min_length=1, max_length=100)
    title_en: str = Field(..., min_length=1, max_length=255)
    title_or: str = Field(..., min_length=1, max_length=255)
    content_en: str
    content_or: str
    icon_name: Optional[str] = Field(default=None, max_length=100)
    order: int = 0
    is_active: bool = True


class AboutContentUpdate(BaseModel):
    section: Optional[str] = Field(default=None, min_length=1, max_length=100)
    title_en: Optional[str] = Field(default=None, min_length=1, max_length=255)
    title_or: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content_en: Optional[str] = None
    content_or: Optional[str] = None
    icon_name: Optional[str] = Field(default=None, max_length=100)
    order: Optional[int] = None
    is_active: Optional[bool] = None


class AboutContentResponse(_Response):
    section: str
    title_en: str
    title_or: str
    content_en: str
    content_or: str
    icon_name: Optional[str] = None
    order: int
    is_active: bool


# ==========================
# Service cards
# ==========================

class ServiceCreate(BaseModel):
    title_en: str = Field(..., min_length=1, max_length=255)
    title_or: str = Field(..., min_length=1, max_length=255)
    description_en: str
    description_or: str
    icon_name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(default="text-primary", max_length=50)
    bg_color: str = Field(default="bg-primary/10", max_length=50)
    order: int = 0
    is_active: bool = True


class ServiceUpdate(BaseModel):
    title_en: Optional[str] = Field(default=None, min_length=1, max_length=255)
    title_or: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description_en: Optional[str] = None
    description_or: Optional[str] = None
    icon_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, max_length=50)
    bg_color: Optional[str] = Field(default=None, max_length=50)
    order: Optional[int] = None
    is_active: Optional[bool] = None


class ServiceResponse(_Response):
    title_en: str
    title_or: str
    description_en: str
    description_or: str
    icon_name: str
    color: str
    bg_color: str
    order: int
    is_active: bool


# ==========================
# Site settings
# ==========================

class SiteSettingCreate(BaseModel):
    key: str = Field(..., min_length=1, max_length=255)
    value: Optional[str] = None
    description: Optional[str] = None


class SiteSettingUpdate(BaseModel):
    key: Optional[str] = Field(default=None, min_length=1, max_length=255)
    value: Optional[str] = None
    description: Optional[str] = None


class SiteSettingResponse(_Response):
    key: str
    value: Optional[str] = None
    description: Optional[str] = None
